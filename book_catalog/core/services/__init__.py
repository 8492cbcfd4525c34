"""Core services package."""

from .book_service import BookService
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

__all__ = [
    "BookService",
    "DbManageService",
    "DbSessionService",
]
