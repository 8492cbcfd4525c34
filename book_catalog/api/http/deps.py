"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from book_catalog.api.http.app_data import ApplicationDependencies
from book_catalog.core.services import BookService
from book_catalog.runtime.config.config_data import ConfigData


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_app_config(request: Request) -> ConfigData:
    """Get the configuration the running application was started with."""
    return get_app_dependencies(request).config


def get_db_session(request: Request) -> Iterator[Session]:
    """Open a database session for the duration of one request."""
    app_deps = get_app_dependencies(request)
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_book_service(db: Session = Depends(get_db_session)) -> BookService:
    return BookService(db)
