"""HTTP client the presentation gateway uses to reach the read service."""

from collections.abc import Iterable

import httpx
from loguru import logger
from pydantic import TypeAdapter
from pydantic import ValidationError as PayloadError

from src.bookstore.core.errors import UpstreamUnavailableError
from src.bookstore.entities.book.entity import BookResponse

_BOOK_LIST = TypeAdapter(list[BookResponse])


class ReadServiceClient:
    """Fetch the full record list from ``GET {base_url}/api/books``.

    Every call is a single attempt bounded by ``timeout``; nothing is cached.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch_books(self) -> list[BookResponse]:
        """Return every book known to the read service.

        Raises:
            UpstreamUnavailableError: on transport failure, timeout, a non-2xx
                status or a payload that is not a list of books.
        """
        url = f"{self._base_url}/api/books"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return _BOOK_LIST.validate_python(response.json())
        except httpx.HTTPError as exc:
            logger.error("Read service request to {} failed: {}", url, exc)
            raise UpstreamUnavailableError(f"read service unavailable: {exc}") from exc
        except (ValueError, PayloadError) as exc:
            logger.error("Read service at {} returned an invalid payload: {}", url, exc)
            raise UpstreamUnavailableError("read service returned an invalid payload") from exc


def distinct_authors(books: Iterable[BookResponse]) -> list[str]:
    """The set of authors, sorted for stable output."""
    return sorted({book.author for book in books})


def distinct_years(books: Iterable[BookResponse]) -> list[str]:
    """The set of publication years, sorted for stable output."""
    return sorted({book.year for book in books})
