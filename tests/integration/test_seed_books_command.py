from __future__ import annotations

from pathlib import Path

import pytest

from apps.seed_books.main import run_seed
from bookshelf.application.services.book_seed_service import SAMPLE_BOOKS, BookSeedOutcome
from bookshelf.infrastructure.db.book_repository import SqlAlchemyBookRepository
from bookshelf.infrastructure.db.session import create_database


@pytest.mark.asyncio
async def test_seed_command_is_idempotent(tmp_path: Path) -> None:
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}"

    first = await run_seed(database_url)
    second = await run_seed(database_url)

    database = create_database(database_url)
    try:
        count = await SqlAlchemyBookRepository(database.session_factory).count_books()
    finally:
        await database.dispose()

    assert first.outcome is BookSeedOutcome.CREATED
    assert first.created_count == len(SAMPLE_BOOKS)
    assert second.outcome is BookSeedOutcome.SKIPPED_BOOKS_PRESENT
    assert count == len(SAMPLE_BOOKS)
