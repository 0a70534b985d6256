"""Async SQLAlchemy engine ownership and session factory helpers."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from bookshelf.infrastructure.db.metadata import metadata


@dataclass(frozen=True)
class Database:
    """Process-owned database handle passed explicitly to repositories."""

    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]

    async def create_schema(self) -> None:
        """Create missing tables; existing tables are left untouched."""

        async with self.engine.begin() as connection:
            await connection.run_sync(metadata.create_all)

    async def dispose(self) -> None:
        """Close pooled connections owned by this handle."""

        await self.engine.dispose()


def create_database(database_url: str) -> Database:
    """Create one database handle for the provided async database URL."""

    engine = create_async_engine(database_url)
    return Database(
        engine=engine,
        session_factory=async_sessionmaker(engine, expire_on_commit=False),
    )
