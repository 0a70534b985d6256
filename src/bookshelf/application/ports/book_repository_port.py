"""Port for book persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from bookshelf.domain.books.book_status import BookStatus


@dataclass(frozen=True)
class BookRecord:
    """Book persistence model."""

    book_id: UUID
    title: str
    author: str
    status: BookStatus
    cover: str
    summary: str
    created_at: datetime


@dataclass(frozen=True)
class BookCreateInput:
    """Insert payload for one new book row."""

    title: str
    author: str
    status: BookStatus
    cover: str
    summary: str


class BookRepositoryPort(Protocol):
    """Book repository contract."""

    async def list_books(self) -> list[BookRecord]:
        """Return every book in insertion order."""

    async def list_by_status(self, *, status: BookStatus) -> list[BookRecord]:
        """Return books with the given reading status."""

    async def get_by_id(self, *, book_id: UUID) -> BookRecord | None:
        """Return one book by id or None."""

    async def count_books(self) -> int:
        """Return total number of persisted books."""

    async def create_book(self, payload: BookCreateInput) -> BookRecord:
        """Insert one book with a freshly generated id."""

    async def set_status(self, *, book_id: UUID, status: BookStatus) -> BookRecord | None:
        """Update one book status and return the updated row, or None when missing."""

    async def delete_book(self, *, book_id: UUID) -> bool:
        """Delete one book and return whether a row was removed."""
