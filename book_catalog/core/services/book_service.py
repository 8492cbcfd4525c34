"""Book service: validation and orchestration on top of the book store."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from loguru import logger
from sqlmodel import Session

from book_catalog.core.covers import Cover, decode_cover
from book_catalog.core.errors import CatalogError
from book_catalog.core.services.seed_data import SAMPLE_BOOKS
from book_catalog.entities.service.book import (
    Book,
    BookFields,
    BookRepository,
    validate_book_fields,
)

T = TypeVar("T")


class BookService:
    """Business operations for the catalog.

    Each public method is one unit of work: it commits when the store call
    succeeds and rolls back when it fails.
    """

    def __init__(
        self,
        session: Session,
        sample_books: Iterable[BookFields] = SAMPLE_BOOKS,
    ) -> None:
        self._session = session
        self._repository = BookRepository(session)
        self._sample_books = tuple(sample_books)

    def _unit_of_work(self, operation: str, action: Callable[[], T], **context: Any) -> T:
        log = logger.bind(operation=operation, **context)
        try:
            result = action()
            self._session.commit()
        except CatalogError as e:
            self._session.rollback()
            log.bind(code=e.code).warning("{} rejected: {}", operation, e.message)
            raise
        except Exception:
            self._session.rollback()
            raise
        return result

    def list_books(self) -> list[Book]:
        return self._repository.list_all()

    def get_book(self, book_id: str) -> Book:
        return self._repository.get(book_id)

    def create_book(self, data: Mapping[str, Any]) -> Book:
        """Validate the submitted fields and store a new book.

        ``year`` is coerced to an integer; title, author, genre and year are
        required.

        Raises:
            ValidationError: a required field is missing or malformed.
        """
        fields = validate_book_fields(data)
        book = self._unit_of_work("create_book", lambda: self._repository.create(fields))
        logger.bind(operation="create_book", book_id=book.id).info("Book created")
        return book

    def update_book(self, book_id: str, data: Mapping[str, Any]) -> Book:
        """Replace the writable fields of an existing book.

        Raises:
            ValidationError: a required field is missing or malformed.
            NotFound: no book has this id.
        """
        fields = validate_book_fields(data)
        book = self._unit_of_work(
            "update_book",
            lambda: self._repository.update(book_id, fields),
            book_id=book_id,
        )
        logger.bind(operation="update_book", book_id=book_id).info("Book updated")
        return book

    def delete_book(self, book_id: str) -> None:
        """Remove a book.

        A repeated delete of the same id raises ``NotFound``; clients that
        retry should treat that as the end state they asked for.
        """
        self._unit_of_work(
            "delete_book", lambda: self._repository.delete(book_id), book_id=book_id
        )
        logger.bind(operation="delete_book", book_id=book_id).info("Book deleted")

    def seed_if_empty(self) -> int:
        """Insert the starter catalog into an empty store and return how many books were added.

        Raises:
            AlreadySeeded: the store already holds books.
        """
        created = self._unit_of_work(
            "seed_if_empty", lambda: self._repository.seed(self._sample_books)
        )
        logger.bind(operation="seed_if_empty", count=len(created)).info("Catalog seeded")
        return len(created)

    def cover_of(self, book_id: str) -> Cover:
        return decode_cover(self.get_book(book_id).cover)
