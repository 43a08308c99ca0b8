"""Book-record lifecycle operations shared by every record service."""

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.bookstore.core.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.entities.book import Book, BookCreate, BookRepository, BookUpdate


def _require(**fields: str) -> None:
    """Raise ValidationError naming every blank field."""
    missing = [name for name, value in fields.items() if not value.strip()]
    if missing:
        raise ValidationError(f"{', '.join(missing)} must not be empty")


class BookService:
    """Create, read, update and delete book records.

    Each deployable service only exposes the operations of its profile, but
    they all share this implementation. Validation happens before any storage
    access; storage faults surface as :class:`StorageError` and are never
    retried here.
    """

    def __init__(self, database_service: DbSessionService):
        self._database_service = database_service

    def create_book(self, book: BookCreate) -> Book:
        """Insert a record unless one with the same external id exists.

        The unique constraint on the external id decides the conflict, so two
        concurrent creates of one id cannot both succeed.

        Raises:
            ValidationError: id, title or author is blank.
            ConflictError: the id is already taken.
            StorageError: the store failed.
        """
        _require(id=book.external_id, title=book.title, author=book.author)
        try:
            with self._database_service.session_scope() as session:
                created = BookRepository(session).add(book)
        except IntegrityError as exc:
            logger.info("Rejected duplicate book id {}", book.external_id)
            raise ConflictError(
                f"book with ID {book.external_id} already exists"
            ) from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to create book {book.external_id}") from exc

        logger.info("Created book {}", created.external_id)
        return created

    def list_books(self) -> list[Book]:
        """Return every record, in no particular order.

        Raises:
            StorageError: the store failed.
        """
        try:
            with self._database_service.session_scope() as session:
                return BookRepository(session).list_all()
        except SQLAlchemyError as exc:
            raise StorageError("failed to list books") from exc

    def update_book(self, external_id: str, fields: BookUpdate) -> None:
        """Replace the five textual fields of an existing record.

        Raises:
            ValidationError: title or author is blank.
            NotFoundError: no record has this id.
            StorageError: the store failed.
        """
        _require(title=fields.title, author=fields.author)
        try:
            with self._database_service.session_scope() as session:
                matched = BookRepository(session).replace_fields(external_id, fields)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to update book {external_id}") from exc

        if matched == 0:
            raise NotFoundError(f"book with ID {external_id} not found")
        logger.info("Updated book {}", external_id)

    def delete_book(self, external_id: str) -> None:
        """Remove a record permanently.

        Raises:
            NotFoundError: no record has this id.
            StorageError: the store failed.
        """
        try:
            with self._database_service.session_scope() as session:
                deleted = BookRepository(session).remove(external_id)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to delete book {external_id}") from exc

        if deleted == 0:
            raise NotFoundError(f"book with ID {external_id} not found")
        logger.info("Deleted book {}", external_id)
