"""Domain errors raised by the book-record lifecycle layer.

Routers translate these into HTTP responses; the seeding job and the CLI
turn the fatal ones into a non-zero exit.
"""

from __future__ import annotations

__all__ = [
    "BookstoreError",
    "ConflictError",
    "NotFoundError",
    "SeedCorruptionError",
    "StartupFailure",
    "StorageError",
    "UpstreamUnavailableError",
    "ValidationError",
]


class BookstoreError(Exception):
    """Base class for bookstore exceptions."""


class ValidationError(BookstoreError):
    """Raised when required input is missing or malformed."""


class ConflictError(BookstoreError):
    """Raised when a book with the same external id already exists."""


class NotFoundError(BookstoreError):
    """Raised when no book matches the given external id."""


class StorageError(BookstoreError):
    """Raised on an unexpected fault while talking to the store."""


class StartupFailure(BookstoreError):
    """Raised when the store stays unreachable after the whole retry budget."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class SeedCorruptionError(BookstoreError):
    """Raised when the seeder finds several records sharing one external id."""

    def __init__(self, external_id: str, count: int) -> None:
        super().__init__(
            f"found {count} records with external id {external_id!r}; "
            "the uniqueness invariant has been violated"
        )
        self.external_id = external_id
        self.count = count


class UpstreamUnavailableError(BookstoreError):
    """Raised by the presentation gateway when the read service cannot answer."""
