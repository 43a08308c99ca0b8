"""Book database table model."""

from sqlalchemy import Column, String, UniqueConstraint
from sqlmodel import Field

from src.bookstore.entities._base import EntityTable


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    This is the shared collection every record operation works against. The
    unique constraint on ``external_id`` is what guarantees at most one live
    record per business key.
    """

    __tablename__ = "books"
    __table_args__ = (
        UniqueConstraint("external_id", name="uq_books_external_id"),
    )

    external_id: str = Field(sa_column=Column(String(), nullable=False, index=True))
    title: str = ""
    author: str = ""
    edition: str = ""
    pages: str = ""
    year: str = ""
