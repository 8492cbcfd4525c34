"""Entity: Book."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from book_catalog.core.covers import decode_cover, encode_cover
from book_catalog.core.errors import ValidationError
from book_catalog.entities._base import Entity

REQUIRED_FIELDS = ("title", "author", "genre", "year")

# Largest magnitude a 64-bit INTEGER column can hold.
_MAX_STORABLE_INT = 2**63 - 1


class BookFields(BaseModel):
    """The client-writable part of a book, already validated and normalized."""

    model_config = ConfigDict(frozen=True)

    title: str
    author: str
    genre: str
    year: int
    cover: str | None = None


class Book(Entity):
    """Book entity representing a catalog entry.

    This is the domain model handed out by the repository. It inherits from
    Entity to get auto-generated UUID identifiers and timestamps.
    """

    title: str = Field(description="Book title")
    author: str = Field(description="Book author")
    genre: str = Field(description="Book genre")
    year: int = Field(description="Publication year")
    cover: str | None = Field(
        default=None,
        description="Inline data:image URI, absolute URL or static-root relative path",
    )

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.genre == other.genre
            and self.year == other.year
            and self.cover == other.cover
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.title,
            self.author,
            self.genre,
            self.year,
            self.cover,
        ))


class BookRead(Book):
    """Wire representation of a book: camelCase timestamps, ``id`` as public key."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_book(cls, book: Book) -> "BookRead":
        return cls.model_validate(book.model_dump())


def coerce_year(value: Any) -> int:
    """Coerce a submitted year to an integer.

    Integers, integral floats and numeric strings are accepted. Booleans are
    rejected even though Python treats them as integers.
    """
    year = _coerce_int(value)
    if abs(year) > _MAX_STORABLE_INT:
        raise ValidationError("year is out of range")
    return year


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise ValidationError("year must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError("year must be an integer")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError("year is required")
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError as e:
            raise ValidationError("year must be an integer") from e
        if number.is_integer():
            return int(number)
    raise ValidationError("year must be an integer")


def _required_text(data: Mapping[str, Any], name: str) -> str:
    value = data.get(name)
    if value is None:
        raise ValidationError(f"{name} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be text")
    text = value.strip()
    if not text:
        raise ValidationError(f"{name} is required")
    return text


def validate_book_fields(data: Mapping[str, Any] | BookFields) -> BookFields:
    """Check and normalize the writable fields of a book.

    Raises:
        ValidationError: a required field is missing, empty or malformed.
    """
    if isinstance(data, BookFields):
        data = data.model_dump()
    if not isinstance(data, Mapping):
        raise ValidationError("book data must be an object")

    missing = [name for name in REQUIRED_FIELDS if data.get(name) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cover = data.get("cover")
    if cover is not None and not isinstance(cover, str):
        raise ValidationError("cover must be text")

    return BookFields(
        title=_required_text(data, "title"),
        author=_required_text(data, "author"),
        genre=_required_text(data, "genre"),
        year=coerce_year(data.get("year")),
        cover=encode_cover(decode_cover(cover)),
    )
