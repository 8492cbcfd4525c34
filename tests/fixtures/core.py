from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
from sqlalchemy import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from book_catalog.core.services import BookService
from book_catalog.entities.service.book import BookRepository

# Models will be imported within fixtures to control timing

__all__ = [
    "book_data",
    "book_factory",
    "repository",
    "service",
    "session",
]


@pytest.fixture
def session() -> Generator[Session]:
    """Create a fresh database session for testing."""
    # Create a unique engine for each test to avoid metadata conflicts
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from book_catalog.entities.service.book import BookTable  # noqa: F401

    # Each test gets a fresh database
    SQLModel.metadata.create_all(engine)

    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()
            session.close()
            engine.dispose()


@pytest.fixture
def repository(session: Session) -> BookRepository:
    return BookRepository(session)


@pytest.fixture
def service(session: Session) -> BookService:
    return BookService(session)


@pytest.fixture
def book_data() -> dict[str, Any]:
    return {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "genre": "Fantasy",
        "year": 1937,
        "cover": "/covers/hobbit.jpg",
    }


@pytest.fixture
def book_factory(book_data: dict[str, Any]) -> Callable[..., dict[str, Any]]:
    """Build request payloads that differ from ``book_data`` only where asked."""

    def _make(**overrides: Any) -> dict[str, Any]:
        payload = dict(book_data)
        payload.update(overrides)
        return payload

    return _make
