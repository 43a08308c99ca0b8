"""Unit tests for the book-record lifecycle operations."""

import pytest

from src.bookstore.core.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.bookstore.core.services import BookService, DbSessionService
from src.bookstore.entities.book import Book, BookCreate, BookUpdate


def _book(external_id: str = "b1", **fields: str) -> BookCreate:
    values = {"title": "T", "author": "A", **fields}
    return BookCreate(external_id=external_id, **values)


class TestCreateBook:
    """Test BookService.create_book."""

    def test_create_stores_the_record(self, book_service: BookService):
        created = book_service.create_book(_book(year="1990"))

        assert created == Book(external_id="b1", title="T", author="A", year="1990")
        assert book_service.list_books() == [created]

    @pytest.mark.parametrize(
        "payload",
        [
            {"external_id": "", "title": "T", "author": "A"},
            {"external_id": "b1", "title": "", "author": "A"},
            {"external_id": "b1", "title": "T", "author": "   "},
        ],
    )
    def test_blank_required_field_is_rejected(
        self, book_service: BookService, payload: dict[str, str]
    ):
        """Validation fails before anything is written."""
        with pytest.raises(ValidationError):
            book_service.create_book(BookCreate(**payload))

        assert book_service.list_books() == []

    def test_duplicate_id_conflicts(self, book_service: BookService):
        book_service.create_book(_book())

        with pytest.raises(ConflictError, match="book with ID b1 already exists"):
            book_service.create_book(_book(title="Other"))

        [stored] = book_service.list_books()
        assert stored.title == "T"

    def test_ids_are_case_sensitive(self, book_service: BookService):
        book_service.create_book(_book("b1"))
        book_service.create_book(_book("B1"))

        assert {book.external_id for book in book_service.list_books()} == {"b1", "B1"}


class TestListBooks:
    """Test BookService.list_books."""

    def test_empty_collection(self, book_service: BookService):
        assert book_service.list_books() == []

    def test_storage_fault_is_distinguishable(self, config):
        """A missing collection surfaces as StorageError, not as an empty list."""
        database_service = DbSessionService(config.database)
        service = BookService(database_service)

        with pytest.raises(StorageError):
            service.list_books()

        database_service.dispose()


class TestUpdateBook:
    """Test BookService.update_book."""

    def test_update_replaces_all_fields(self, book_service: BookService):
        book_service.create_book(_book(pages="100", edition="1st", year="1990"))

        book_service.update_book("b1", BookUpdate(title="T2", author="A2", year="2001"))

        assert book_service.list_books() == [
            Book(external_id="b1", title="T2", author="A2", year="2001")
        ]

    def test_update_missing_record(self, book_service: BookService):
        book_service.create_book(_book())

        with pytest.raises(NotFoundError, match="book with ID nope not found"):
            book_service.update_book("nope", BookUpdate(title="T", author="A"))

        assert [book.external_id for book in book_service.list_books()] == ["b1"]

    def test_update_requires_title_and_author(self, book_service: BookService):
        book_service.create_book(_book())

        with pytest.raises(ValidationError):
            book_service.update_book("b1", BookUpdate(title="", author="A"))

        [stored] = book_service.list_books()
        assert stored.title == "T"


class TestDeleteBook:
    """Test BookService.delete_book."""

    def test_delete_removes_the_record(self, book_service: BookService):
        book_service.create_book(_book("b1"))
        book_service.create_book(_book("b2"))

        book_service.delete_book("b1")

        assert [book.external_id for book in book_service.list_books()] == ["b2"]

    def test_delete_missing_record(self, book_service: BookService):
        with pytest.raises(NotFoundError):
            book_service.delete_book("nope")

    def test_delete_twice(self, book_service: BookService):
        book_service.create_book(_book())
        book_service.delete_book("b1")

        with pytest.raises(NotFoundError):
            book_service.delete_book("b1")


class TestStorageFaults:
    """Write operations against a store without the collection."""

    @pytest.fixture
    def broken_service(self, config):
        database_service = DbSessionService(config.database)
        yield BookService(database_service)
        database_service.dispose()

    def test_create(self, broken_service: BookService):
        with pytest.raises(StorageError):
            broken_service.create_book(_book())

    def test_update(self, broken_service: BookService):
        with pytest.raises(StorageError):
            broken_service.update_book("b1", BookUpdate(title="T", author="A"))

    def test_delete(self, broken_service: BookService):
        with pytest.raises(StorageError):
            broken_service.delete_book("b1")
