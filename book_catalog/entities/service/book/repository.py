"""Book repository: the book store."""

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from book_catalog.core.errors import AlreadySeeded, NotFound, StoreUnavailable
from book_catalog.entities._base import utcnow
from book_catalog.entities.service.book.entity import (
    Book,
    BookFields,
    validate_book_fields,
)
from book_catalog.entities.service.book.table import BookTable


class BookRepository:
    """Data-access layer for books.

    Rows never leave this class: every method returns ``Book`` entities, and
    driver errors surface as ``StoreUnavailable``. The repository flushes but
    does not commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _store_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.bind(operation=operation, error_type=type(e).__name__).error(
                "Book store call failed"
            )
            raise StoreUnavailable() from e

    @staticmethod
    def _to_entity(row: BookTable) -> Book:
        return Book.model_validate(row, from_attributes=True)

    def _get_row(self, book_id: str) -> BookTable | None:
        statement = select(BookTable).where(BookTable.id == book_id)
        return self._session.exec(statement).first()

    def create(self, fields: BookFields | Mapping[str, Any]) -> Book:
        """Insert a new book and return it with its generated id and timestamps."""
        valid = validate_book_fields(fields)
        with self._store_call("create"):
            row = BookTable(**valid.model_dump())
            self._session.add(row)
            self._session.flush()
            self._session.refresh(row)
            return self._to_entity(row)

    def get(self, book_id: str) -> Book:
        with self._store_call("get"):
            row = self._get_row(book_id)
            if row is None:
                raise NotFound(book_id)
            return self._to_entity(row)

    def update(self, book_id: str, fields: BookFields | Mapping[str, Any]) -> Book:
        """Replace title, author, genre, year and cover of an existing book."""
        valid = validate_book_fields(fields)
        with self._store_call("update"):
            row = self._get_row(book_id)
            if row is None:
                raise NotFound(book_id)

            for name, value in valid.model_dump().items():
                setattr(row, name, value)
            row.updated_at = utcnow()

            self._session.add(row)
            self._session.flush()
            self._session.refresh(row)
            return self._to_entity(row)

    def delete(self, book_id: str) -> None:
        with self._store_call("delete"):
            row = self._get_row(book_id)
            if row is None:
                raise NotFound(book_id)
            self._session.delete(row)
            self._session.flush()

    def list_all(self) -> list[Book]:
        """Return every book, most recently created first."""
        with self._store_call("list"):
            statement = select(BookTable).order_by(
                col(BookTable.created_at).desc(), col(BookTable.pk).desc()
            )
            return [self._to_entity(row) for row in self._session.exec(statement)]

    def count(self) -> int:
        with self._store_call("count"):
            return self._session.exec(select(func.count()).select_from(BookTable)).one()

    def seed(self, records: Iterable[BookFields | Mapping[str, Any]]) -> list[Book]:
        """Insert a starter set, only when the store holds no books yet.

        Raises:
            AlreadySeeded: the store is not empty.
        """
        if self.count() > 0:
            raise AlreadySeeded()

        valid = [validate_book_fields(record) for record in records]
        with self._store_call("seed"):
            rows = [BookTable(**fields.model_dump()) for fields in valid]
            self._session.add_all(rows)
            self._session.flush()
            for row in rows:
                self._session.refresh(row)
            return [self._to_entity(row) for row in rows]
