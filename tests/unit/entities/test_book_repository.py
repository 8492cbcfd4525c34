"""Unit tests for BookRepository against an in-memory SQLite store."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from book_catalog.core.errors import (
    AlreadySeeded,
    NotFound,
    StoreUnavailable,
    ValidationError,
)
from book_catalog.entities.service.book import BookFields


def _fields(title: str, year: int = 2000) -> BookFields:
    return BookFields(title=title, author="Author", genre="Genre", year=year)


class TestBookRepository:
    """Test CRUD operations of the book store."""

    def test_create_assigns_id_and_timestamps(self, repository, book_data):
        book = repository.create(book_data)

        assert book.id
        assert book.title == "The Hobbit"
        assert book.year == 1937
        assert book.cover == "/covers/hobbit.jpg"
        assert book.created_at is not None
        assert book.updated_at is not None

    def test_create_coerces_year(self, repository, book_factory):
        book = repository.create(book_factory(year="1937"))

        assert book.year == 1937

    def test_create_generates_distinct_ids(self, repository, book_data):
        first = repository.create(book_data)
        second = repository.create(book_data)

        assert first.id != second.id

    def test_invalid_data_persists_nothing(self, repository, book_factory):
        with pytest.raises(ValidationError):
            repository.create(book_factory(title=""))

        assert repository.count() == 0

    def test_get_returns_stored_book(self, repository, book_data):
        created = repository.create(book_data)

        assert repository.get(created.id) == created

    def test_get_unknown_id(self, repository):
        with pytest.raises(NotFound) as exc_info:
            repository.get("does-not-exist")

        assert exc_info.value.book_id == "does-not-exist"

    def test_update_replaces_fields_and_keeps_identity(self, repository, book_data):
        created = repository.create(book_data)

        updated = repository.update(
            created.id,
            {"title": "The Hobbit, Revised", "author": "Tolkien", "genre": "Fantasy", "year": 1951},
        )

        assert updated.id == created.id
        assert updated.title == "The Hobbit, Revised"
        assert updated.year == 1951
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    def test_update_without_cover_clears_it(self, repository, book_data):
        created = repository.create(book_data)
        payload = dict(book_data)
        del payload["cover"]

        assert repository.update(created.id, payload).cover is None

    def test_update_unknown_id(self, repository, book_data):
        with pytest.raises(NotFound):
            repository.update("missing", book_data)

        assert repository.count() == 0

    def test_update_rejects_invalid_data(self, repository, book_data, book_factory):
        created = repository.create(book_data)

        with pytest.raises(ValidationError):
            repository.update(created.id, book_factory(year="soon"))

        assert repository.get(created.id).year == 1937

    def test_delete_removes_book(self, repository, book_data):
        created = repository.create(book_data)

        repository.delete(created.id)

        with pytest.raises(NotFound):
            repository.get(created.id)

    def test_second_delete_is_not_found(self, repository, book_data):
        created = repository.create(book_data)
        repository.delete(created.id)

        with pytest.raises(NotFound):
            repository.delete(created.id)

    def test_list_all_newest_first(self, repository):
        first = repository.create(_fields("First"))
        second = repository.create(_fields("Second"))
        third = repository.create(_fields("Third"))

        assert [book.id for book in repository.list_all()] == [third.id, second.id, first.id]

    def test_list_all_empty(self, repository):
        assert repository.list_all() == []

    def test_count(self, repository):
        assert repository.count() == 0
        repository.create(_fields("One"))
        repository.create(_fields("Two"))
        assert repository.count() == 2


class TestSeeding:
    """Test seeding of an empty store."""

    def test_seed_empty_store(self, repository):
        created = repository.seed([_fields("A"), _fields("B")])

        assert [book.title for book in created] == ["A", "B"]
        assert repository.count() == 2

    def test_seed_non_empty_store(self, repository):
        repository.create(_fields("Existing"))

        with pytest.raises(AlreadySeeded):
            repository.seed([_fields("A"), _fields("B")])

        assert repository.count() == 1


class TestStoreFailures:
    """Driver errors should surface as StoreUnavailable."""

    def test_query_failure(self, repository, session):
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch.object(session, "exec", side_effect=error):
            with pytest.raises(StoreUnavailable) as exc_info:
                repository.list_all()

        assert exc_info.value.status_code == 500

    def test_write_failure(self, repository, session, book_data):
        error = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch.object(session, "flush", side_effect=error):
            with pytest.raises(StoreUnavailable):
                repository.create(book_data)
