"""Pydantic models for book endpoints."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from bookshelf.application.dto.common import StrictModel
from bookshelf.application.ports.book_repository_port import BookCreateInput, BookRecord
from bookshelf.domain.books.book_status import BookStatus


class BookCreateRequest(StrictModel):
    """HTTP request model for adding one book."""

    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    status: BookStatus
    cover: str
    summary: str

    def to_create_input(self) -> BookCreateInput:
        return BookCreateInput(
            title=self.title,
            author=self.author,
            status=self.status,
            cover=self.cover,
            summary=self.summary,
        )


class BookStatusUpdateRequest(StrictModel):
    """HTTP request model for changing one book reading status."""

    status: BookStatus


class BookResponse(StrictModel):
    """One book as exposed by the API."""

    id: UUID
    title: str
    author: str
    status: BookStatus
    cover: str
    summary: str

    @classmethod
    def from_record(cls, record: BookRecord) -> BookResponse:
        return cls(
            id=record.book_id,
            title=record.title,
            author=record.author,
            status=record.status,
            cover=record.cover,
            summary=record.summary,
        )


class BookEnvelope(StrictModel):
    """Success envelope carrying one book."""

    success: bool = True
    message: str
    data: BookResponse


class BookListEnvelope(StrictModel):
    """Success envelope carrying a list of books."""

    success: bool = True
    message: str
    data: list[BookResponse]


class BookCreatedResponse(StrictModel):
    """Success envelope returned after creating one book."""

    success: bool = True
    message: str
    id: UUID
