from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from bookshelf.application.ports.book_repository_port import BookCreateInput, BookRecord
from bookshelf.application.services.book_seed_service import (
    SAMPLE_BOOKS,
    BookSeedOutcome,
    seed_sample_books,
)
from bookshelf.domain.books.book_status import BookStatus


class InMemoryBookRepository:
    def __init__(self) -> None:
        self.books: list[BookRecord] = []

    async def count_books(self) -> int:
        return len(self.books)

    async def create_book(self, payload: BookCreateInput) -> BookRecord:
        book = BookRecord(
            book_id=uuid4(),
            title=payload.title,
            author=payload.author,
            status=payload.status,
            cover=payload.cover,
            summary=payload.summary,
            created_at=datetime.now(tz=UTC),
        )
        self.books.append(book)
        return book


def test_sample_books_cover_every_status() -> None:
    assert {book.status for book in SAMPLE_BOOKS} == set(BookStatus)


@pytest.mark.asyncio
async def test_seed_inserts_samples_into_empty_shelf() -> None:
    repository = InMemoryBookRepository()

    result = await seed_sample_books(books=repository)  # type: ignore[arg-type]

    assert result.outcome is BookSeedOutcome.CREATED
    assert result.created_count == len(SAMPLE_BOOKS)
    assert [book.title for book in repository.books] == [book.title for book in SAMPLE_BOOKS]


@pytest.mark.asyncio
async def test_seed_skips_when_books_present() -> None:
    repository = InMemoryBookRepository()
    await seed_sample_books(books=repository)  # type: ignore[arg-type]

    result = await seed_sample_books(books=repository)  # type: ignore[arg-type]

    assert result.outcome is BookSeedOutcome.SKIPPED_BOOKS_PRESENT
    assert result.created_count == 0
    assert len(repository.books) == len(SAMPLE_BOOKS)
