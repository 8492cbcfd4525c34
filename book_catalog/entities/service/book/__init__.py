"""Entity package: Book."""

from .entity import Book, BookFields, BookRead, validate_book_fields
from .repository import BookRepository
from .table import BookTable

__all__ = [
    "Book",
    "BookFields",
    "BookRead",
    "BookRepository",
    "BookTable",
    "validate_book_fields",
]
