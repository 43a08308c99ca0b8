"""Book repository for data access operations."""

from sqlalchemy import delete, func, update
from sqlmodel import Session, select

from .entity import Book, BookCreate, BookUpdate
from .table import BookTable


class BookRepository:
    """Data-access layer for books.

    Every method works inside the caller's session; committing is left to the
    caller so that a unit of work stays under its control.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, book: BookCreate) -> Book:
        """Insert a new row; a duplicate external id fails at flush time."""
        row = BookTable(
            external_id=book.external_id,
            title=book.title,
            author=book.author,
            edition=book.edition,
            pages=book.pages,
            year=book.year,
        )
        self._session.add(row)
        self._session.flush()
        return Book.model_validate(row, from_attributes=True)

    def get(self, external_id: str) -> Book | None:
        statement = select(BookTable).where(BookTable.external_id == external_id)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def count_by_external_id(self, external_id: str) -> int:
        statement = (
            select(func.count())
            .select_from(BookTable)
            .where(BookTable.external_id == external_id)
        )
        return self._session.exec(statement).one()

    def list_all(self) -> list[Book]:
        rows = self._session.exec(select(BookTable)).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def replace_fields(self, external_id: str, fields: BookUpdate) -> int:
        """Overwrite the five textual fields in one statement.

        Returns:
            The number of rows matched.
        """
        statement = (
            update(BookTable)
            .where(BookTable.external_id == external_id)
            .values(
                title=fields.title,
                author=fields.author,
                edition=fields.edition,
                pages=fields.pages,
                year=fields.year,
            )
        )
        result = self._session.exec(statement)
        return result.rowcount

    def remove(self, external_id: str) -> int:
        """Delete the matching rows and return how many were removed."""
        statement = delete(BookTable).where(BookTable.external_id == external_id)
        result = self._session.exec(statement)
        return result.rowcount
