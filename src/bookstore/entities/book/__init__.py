"""Entity package: Book."""

from .entity import Book, BookCreate, BookUpdate
from .repository import BookRepository
from .table import BookTable

__all__ = ["Book", "BookCreate", "BookRepository", "BookTable", "BookUpdate"]
