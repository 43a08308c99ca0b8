"""Core services exports."""

from .book_service import BookService
from .database import DbManageService, DbSessionService, StorageGateway
from .read_client import ReadServiceClient, distinct_authors, distinct_years

__all__ = [
    # Record operations
    "BookService",
    # Storage
    "DbManageService",
    "DbSessionService",
    "StorageGateway",
    # Presentation gateway
    "ReadServiceClient",
    "distinct_authors",
    "distinct_years",
]
