"""FastAPI router for reading-list book endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, HTTPException, Response

from bookshelf.application.dto.book_models import (
    BookCreatedResponse,
    BookCreateRequest,
    BookEnvelope,
    BookListEnvelope,
    BookResponse,
    BookStatusUpdateRequest,
)
from bookshelf.application.services.book_service import (
    BookNotFoundError,
    BookService,
    BookStatusUnchangedError,
)
from bookshelf.domain.books.book_status import BookStatus


def build_books_router(*, book_service: BookService) -> APIRouter:
    """Build router exposing book CRUD endpoints."""

    router = APIRouter(prefix="/books", tags=["books"])

    @router.get("", response_model=BookListEnvelope)
    async def list_books() -> BookListEnvelope:
        books = await book_service.list_books()
        return BookListEnvelope(
            message="books retrieved",
            data=[BookResponse.from_record(book) for book in books],
        )

    @router.get("/status/{status}", response_model=BookListEnvelope)
    async def list_books_by_status(status: str) -> BookListEnvelope:
        book_status = _parse_book_status(status)
        books = await book_service.list_books_by_status(status=book_status)
        if not books:
            raise HTTPException(
                status_code=404,
                detail=f"no book with status {book_status.value}",
            )
        return BookListEnvelope(
            message="books retrieved",
            data=[BookResponse.from_record(book) for book in books],
        )

    @router.get("/{book_id}", response_model=BookEnvelope)
    async def get_book(book_id: UUID) -> BookEnvelope:
        try:
            book = await book_service.get_book(book_id=book_id)
        except BookNotFoundError as exc:
            raise HTTPException(status_code=404, detail="book not found") from exc
        return BookEnvelope(message="book retrieved", data=BookResponse.from_record(book))

    @router.post("", status_code=201, response_model=BookCreatedResponse)
    async def create_book(payload: BookCreateRequest) -> BookCreatedResponse:
        created = await book_service.create_book(payload=payload.to_create_input())
        return BookCreatedResponse(message="book created", id=created.book_id)

    @router.patch("/{book_id}", status_code=204, response_class=Response)
    async def update_book_status(book_id: UUID, payload: BookStatusUpdateRequest) -> Response:
        try:
            await book_service.update_status(book_id=book_id, status=payload.status)
        except BookNotFoundError as exc:
            raise HTTPException(status_code=404, detail="book not found") from exc
        except BookStatusUnchangedError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return Response(status_code=204)

    @router.delete("/{book_id}", status_code=204, response_class=Response)
    async def delete_book(book_id: UUID) -> Response:
        try:
            await book_service.delete_book(book_id=book_id)
        except BookNotFoundError as exc:
            raise HTTPException(status_code=404, detail="book not found") from exc
        return Response(status_code=204)

    return router


def _parse_book_status(raw_status: str) -> BookStatus:
    """Parse a path status value or raise an unprocessable-entity error."""

    normalized = raw_status.strip().lower()
    try:
        return BookStatus(normalized)
    except ValueError as exc:
        expected = " | ".join(status.value for status in BookStatus)
        raise HTTPException(
            status_code=422,
            detail=f"invalid book status: {normalized} (expected {expected})",
        ) from exc
