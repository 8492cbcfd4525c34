"""Domain errors raised by the book store and the book service.

Each error carries a stable machine-readable ``code`` and the HTTP status the
transport layer answers with. Messages are safe to show to API clients.
"""


class CatalogError(Exception):
    """Base class for every error the catalog reports to its callers."""

    code = "catalog_error"
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """A required field is missing or malformed."""

    code = "validation_error"
    status_code = 400
    default_message = "Invalid book data"


class NotFound(CatalogError):
    """The operation targets a book id that does not exist."""

    code = "not_found"
    status_code = 404
    default_message = "Book not found"

    def __init__(self, book_id: str | None = None, message: str | None = None) -> None:
        self.book_id = book_id
        super().__init__(message)


class AlreadySeeded(CatalogError):
    """The seed operation was called on a non-empty store."""

    code = "already_seeded"
    status_code = 400
    default_message = "Books already exist. Not seeding again."


class StoreUnavailable(CatalogError):
    """The underlying persistence layer could not be reached."""

    code = "store_unavailable"
    status_code = 500
    default_message = "Book store is unavailable"
