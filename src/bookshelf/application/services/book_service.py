"""Application service for reading-list book operations."""

from __future__ import annotations

import logging
from uuid import UUID

from bookshelf.application.ports.book_repository_port import (
    BookCreateInput,
    BookRecord,
    BookRepositoryPort,
)
from bookshelf.domain.books.book_status import BookStatus

logger = logging.getLogger(__name__)


class BookNotFoundError(LookupError):
    """Raised when a target book cannot be found."""

    def __init__(self, *, book_id: UUID) -> None:
        super().__init__(f"book not found: {book_id}")
        self.book_id = book_id


class BookStatusUnchangedError(ValueError):
    """Raised when a status update would keep the current status."""

    def __init__(self, *, book_id: UUID, status: BookStatus) -> None:
        super().__init__(f"book already has status {status.value}")
        self.book_id = book_id
        self.status = status


class BookService:
    """Expose book listing, creation, status and removal use-cases."""

    def __init__(self, *, books: BookRepositoryPort) -> None:
        self._books = books

    async def list_books(self) -> list[BookRecord]:
        return await self._books.list_books()

    async def list_books_by_status(self, *, status: BookStatus) -> list[BookRecord]:
        return await self._books.list_by_status(status=status)

    async def get_book(self, *, book_id: UUID) -> BookRecord:
        """Return one book or raise a not-found error."""

        book = await self._books.get_by_id(book_id=book_id)
        if book is None:
            raise BookNotFoundError(book_id=book_id)
        return book

    async def create_book(self, *, payload: BookCreateInput) -> BookRecord:
        created = await self._books.create_book(payload)
        logger.info("book_created book_id=%s status=%s", created.book_id, created.status.value)
        return created

    async def update_status(self, *, book_id: UUID, status: BookStatus) -> BookRecord:
        """Move one book to a different reading status."""

        current = await self.get_book(book_id=book_id)
        if current.status is status:
            raise BookStatusUnchangedError(book_id=book_id, status=status)

        updated = await self._books.set_status(book_id=book_id, status=status)
        if updated is None:  # pragma: no cover - removed between read and write.
            raise BookNotFoundError(book_id=book_id)
        logger.info(
            "book_status_updated book_id=%s from=%s to=%s",
            book_id,
            current.status.value,
            status.value,
        )
        return updated

    async def delete_book(self, *, book_id: UUID) -> None:
        """Delete one book or raise a not-found error."""

        deleted = await self._books.delete_book(book_id=book_id)
        if not deleted:
            raise BookNotFoundError(book_id=book_id)
        logger.info("book_deleted book_id=%s", book_id)
