"""Book API routers, one per record operation.

Each deployable service includes only the router of its own operation.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from loguru import logger

from src.bookstore.api.http.deps import get_app_config, get_book_service
from src.bookstore.core.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.bookstore.core.services import BookService
from src.bookstore.entities.book import BookCreate, BookUpdate
from src.bookstore.entities.book.entity import BookResponse
from src.bookstore.runtime.config.config_data import ConfigData

PREFIX = "/api/books"
DEGRADED_HEADER = "X-Storage-Degraded"

create_router = APIRouter(prefix=PREFIX, tags=["books"])
read_router = APIRouter(prefix=PREFIX, tags=["books"])
update_router = APIRouter(prefix=PREFIX, tags=["books"])
delete_router = APIRouter(prefix=PREFIX, tags=["books"])


@create_router.post("", status_code=status.HTTP_201_CREATED)
def create_book(
    book: BookCreate,
    service: BookService = Depends(get_book_service),
) -> dict[str, str]:
    """Create a new book."""
    try:
        service.create_book(book)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError as e:
        logger.opt(exception=e).error("Create failed")
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Book created successfully"}


@read_router.get("", response_model=list[BookResponse])
def list_books(
    response: Response,
    service: BookService = Depends(get_book_service),
    config: ConfigData = Depends(get_app_config),
) -> list[BookResponse]:
    """List all books.

    A storage failure answers with an empty list and the degraded header,
    unless ``catalog.read_failure_mode`` is ``error``.
    """
    try:
        books = service.list_books()
    except StorageError as e:
        if config.catalog.read_failure_mode == "error":
            logger.opt(exception=e).error("Listing books failed")
            raise HTTPException(status_code=500, detail=str(e))
        logger.opt(exception=e).warning("Listing books failed; answering with no books")
        response.headers[DEGRADED_HEADER] = "true"
        return []
    return [book.to_response() for book in books]


@update_router.put("/{book_id}")
def update_book(
    book_id: str,
    fields: BookUpdate,
    service: BookService = Depends(get_book_service),
) -> dict[str, str]:
    """Update a book."""
    try:
        service.update_book(book_id, fields)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        logger.opt(exception=e).error("Update failed")
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Book updated successfully"}


@delete_router.delete("/{book_id}")
def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> dict[str, str]:
    """Delete a book."""
    try:
        service.delete_book(book_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        logger.opt(exception=e).error("Delete failed")
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Book deleted successfully"}
