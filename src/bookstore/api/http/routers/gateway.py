"""Presentation gateway routes: views derived from the read service."""

from fastapi import APIRouter, Depends, HTTPException

from src.bookstore.api.http.deps import get_read_client
from src.bookstore.core.errors import UpstreamUnavailableError
from src.bookstore.core.services import (
    ReadServiceClient,
    distinct_authors,
    distinct_years,
)
from src.bookstore.entities.book.entity import BookResponse

router = APIRouter(tags=["gateway"])


async def _fetch(client: ReadServiceClient) -> list[BookResponse]:
    try:
        return await client.fetch_books()
    except UpstreamUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/books", response_model=list[BookResponse])
async def books(client: ReadServiceClient = Depends(get_read_client)) -> list[BookResponse]:
    """Every book, as returned by the read service."""
    return await _fetch(client)


@router.get("/authors")
async def authors(
    client: ReadServiceClient = Depends(get_read_client),
) -> list[dict[str, str]]:
    """The distinct authors across all books."""
    return [{"author": author} for author in distinct_authors(await _fetch(client))]


@router.get("/years")
async def years(
    client: ReadServiceClient = Depends(get_read_client),
) -> list[dict[str, str]]:
    """The distinct publication years across all books."""
    return [{"year": year} for year in distinct_years(await _fetch(client))]
