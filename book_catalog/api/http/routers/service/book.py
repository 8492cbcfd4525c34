"""Book API router with CRUD operations."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Response
from fastapi.responses import RedirectResponse

from book_catalog.api.http.deps import get_app_config, get_book_service
from book_catalog.core.covers import CoverReference, InlineImage, resolve_cover_url
from book_catalog.core.errors import NotFound
from book_catalog.core.services import BookService
from book_catalog.entities.service.book import BookRead
from book_catalog.runtime.config.config_data import ConfigData

router = APIRouter(tags=["books"])

# Client-supplied bytes are never rendered as an active document
COVER_CSP = "default-src 'none'; sandbox"


@router.get("", response_model=list[BookRead])
def list_books(
    service: BookService = Depends(get_book_service),
) -> list[BookRead]:
    """List all books, newest first."""
    return [BookRead.from_book(book) for book in service.list_books()]


@router.post("", response_model=BookRead, status_code=201)
def create_book(
    payload: dict[str, Any] = Body(...),
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Create a new book."""
    return BookRead.from_book(service.create_book(payload))


# Registered before "/{book_id}" so "seed" is never taken for an id
@router.get("/seed")
def seed_books(
    service: BookService = Depends(get_book_service),
) -> dict[str, Any]:
    """Insert the starter catalog into an empty store."""
    count = service.seed_if_empty()
    return {"message": "Seeded successfully", "count": count}


@router.get("/{book_id}", response_model=BookRead)
def get_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Get a book by ID."""
    return BookRead.from_book(service.get_book(book_id))


@router.get("/{book_id}/cover", response_model=None)
def get_book_cover(
    book_id: str,
    service: BookService = Depends(get_book_service),
    config: ConfigData = Depends(get_app_config),
) -> Response:
    """Serve the cover of a book.

    Inline images are decoded and returned as image bytes; references are
    resolved against the public base URL and redirected to.
    """
    cover = service.cover_of(book_id)
    if isinstance(cover, InlineImage):
        return Response(
            content=cover.data,
            media_type=cover.mime_type,
            headers={"Content-Security-Policy": COVER_CSP},
        )
    if isinstance(cover, CoverReference):
        url = resolve_cover_url(cover.location, config.catalog.public_base_url)
        return RedirectResponse(url, status_code=307)
    raise NotFound(book_id, "Book has no cover")


@router.put("/{book_id}", response_model=BookRead)
def update_book(
    book_id: str,
    payload: dict[str, Any] = Body(...),
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Update a book."""
    return BookRead.from_book(service.update_book(book_id, payload))


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> dict[str, str]:
    """Delete a book."""
    service.delete_book(book_id)
    return {"message": "Book deleted", "id": book_id}
