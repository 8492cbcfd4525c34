"""Unit tests for BookService."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from book_catalog.core.covers import CoverReference, EmptyCover, InlineImage
from book_catalog.core.errors import (
    AlreadySeeded,
    NotFound,
    StoreUnavailable,
    ValidationError,
)
from book_catalog.core.services import BookService
from book_catalog.core.services.seed_data import SAMPLE_BOOKS
from book_catalog.entities.service.book import BookFields


class TestBookService:
    """Test book operations as the API performs them."""

    def test_create_and_get(self, service, book_data):
        created = service.create_book(book_data)

        assert service.get_book(created.id) == created

    def test_create_missing_fields(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.create_book({"title": "Untitled"})

        assert "author" in exc_info.value.message
        assert service.list_books() == []

    def test_created_book_survives_a_new_session(self, service, session, book_data):
        created = service.create_book(book_data)
        session.expunge_all()

        assert BookService(session).get_book(created.id).title == "The Hobbit"

    def test_update(self, service, book_data, book_factory):
        created = service.create_book(book_data)

        updated = service.update_book(created.id, book_factory(genre="Classic"))

        assert updated.genre == "Classic"
        assert service.get_book(created.id).genre == "Classic"

    def test_update_unknown_id(self, service, book_data):
        with pytest.raises(NotFound):
            service.update_book("missing", book_data)

        assert service.list_books() == []

    def test_update_validates_before_lookup(self, service):
        with pytest.raises(ValidationError):
            service.update_book("missing", {"title": "Only a title"})

    def test_delete_twice(self, service, book_data):
        created = service.create_book(book_data)

        service.delete_book(created.id)

        with pytest.raises(NotFound):
            service.delete_book(created.id)
        with pytest.raises(NotFound):
            service.get_book(created.id)

    def test_list_books_newest_first(self, service, book_factory):
        older = service.create_book(book_factory(title="Older"))
        newer = service.create_book(book_factory(title="Newer"))

        assert [book.id for book in service.list_books()] == [newer.id, older.id]

    def test_store_failure_rolls_back(self, service, session, book_data):
        error = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch.object(session, "flush", side_effect=error):
            with pytest.raises(StoreUnavailable):
                service.create_book(book_data)

        assert service.list_books() == []


class TestSeedIfEmpty:
    """Test the starter catalog."""

    def test_seed_inserts_sample_books(self, service):
        assert service.seed_if_empty() == len(SAMPLE_BOOKS) == 9

        titles = {book.title for book in service.list_books()}
        assert "Clean Code" in titles
        assert "Brave New World" in titles

    def test_second_seed_is_rejected(self, service):
        service.seed_if_empty()

        with pytest.raises(AlreadySeeded) as exc_info:
            service.seed_if_empty()

        assert exc_info.value.message == "Books already exist. Not seeding again."
        assert len(service.list_books()) == 9

    def test_seed_with_custom_samples(self, session):
        samples = [BookFields(title="Dune", author="Frank Herbert", genre="Sci-Fi", year=1965)]

        assert BookService(session, sample_books=samples).seed_if_empty() == 1


class TestCoverOf:
    """Test access to a book's decoded cover."""

    def test_reference_cover(self, service, book_data):
        created = service.create_book(book_data)

        assert service.cover_of(created.id) == CoverReference(location="/covers/hobbit.jpg")

    def test_inline_cover(self, service, book_factory):
        created = service.create_book(book_factory(cover="data:image/png;base64,AAAA"))

        cover = service.cover_of(created.id)
        assert isinstance(cover, InlineImage)
        assert cover.mime_type == "image/png"

    def test_no_cover(self, service, book_factory):
        created = service.create_book(book_factory(cover=None))

        assert service.cover_of(created.id) == EmptyCover()

    def test_unknown_book(self, service):
        with pytest.raises(NotFound):
            service.cover_of("missing")
