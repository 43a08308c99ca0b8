"""Entity: Book."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class _BookFields(BaseModel):
    """The mutable textual attributes shared by every book shape."""

    title: str = Field(default="", description="Title")
    author: str = Field(default="", description="Author")
    pages: str = Field(default="", description="Page count, free-form")
    edition: str = Field(default="", description="Edition, usually an ISBN")
    year: str = Field(default="", description="Publication year, free-form")

    @field_validator("title", "author", "pages", "edition", "year", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class BookCreate(_BookFields):
    """Payload accepted by the create operation."""

    model_config = ConfigDict(extra="ignore")

    external_id: str = Field(
        default="",
        validation_alias=AliasChoices("id", "external_id"),
        description="Caller-assigned business key",
    )

    @field_validator("external_id", mode="before")
    @classmethod
    def _none_id_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class BookUpdate(_BookFields):
    """Payload accepted by the update operation.

    The external id comes from the path; an ``id`` in the body is ignored.
    """

    model_config = ConfigDict(extra="ignore")


class BookResponse(BaseModel):
    """Public representation of a book."""

    id: str
    title: str
    author: str
    pages: str
    edition: str
    year: str


class Book(_BookFields):
    """Book domain entity.

    ``external_id`` is the business key; the storage identity of the row is
    not part of this model.
    """

    model_config = ConfigDict(from_attributes=True)

    external_id: str = Field(description="Caller-assigned business key")

    def to_response(self) -> BookResponse:
        """Project the entity into its public shape."""
        return BookResponse(
            id=self.external_id,
            title=self.title,
            author=self.author,
            pages=self.pages,
            edition=self.edition,
            year=self.year,
        )

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes."""
        if not isinstance(other, Book):
            return False
        return self.model_dump() == other.model_dump()

    def __hash__(self) -> int:
        return hash(tuple(self.model_dump().values()))
