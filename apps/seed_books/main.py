"""seed-books entrypoint: fill an empty database with the sample reading list."""

from __future__ import annotations

import asyncio
import logging

from bookshelf.application.services.book_seed_service import BookSeedResult, seed_sample_books
from bookshelf.config.settings import load_settings
from bookshelf.infrastructure.db.book_repository import SqlAlchemyBookRepository
from bookshelf.infrastructure.db.session import create_database
from bookshelf.infrastructure.logging import configure_logging

logger = logging.getLogger(__name__)


async def run_seed(database_url: str) -> BookSeedResult:
    """Create missing tables and seed sample books for one database."""

    database = create_database(database_url)
    try:
        await database.create_schema()
        result = await seed_sample_books(books=SqlAlchemyBookRepository(database.session_factory))
    finally:
        await database.dispose()

    logger.info(
        "book_seed_finished outcome=%s created=%d",
        result.outcome.value,
        result.created_count,
    )
    return result


def main() -> None:
    """Run the seed command against the configured database."""

    settings = load_settings()
    configure_logging(level=settings.log_level)
    asyncio.run(run_seed(settings.database_url))


if __name__ == "__main__":
    main()
