"""SQLAlchemy adapter for book persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bookshelf.application.ports.book_repository_port import (
    BookCreateInput,
    BookRecord,
    BookRepositoryPort,
)
from bookshelf.domain.books.book_status import BookStatus
from bookshelf.infrastructure.db.metadata import books

_BOOK_COLUMNS = (
    books.c.id,
    books.c.title,
    books.c.author,
    books.c.status,
    books.c.cover,
    books.c.summary,
    books.c.created_at,
)


class SqlAlchemyBookRepository(BookRepositoryPort):
    """Book repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_books(self) -> list[BookRecord]:
        statement = sa.select(*_BOOK_COLUMNS).order_by(books.c.created_at, books.c.title)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_book_record(row) for row in result.mappings().all()]

    async def list_by_status(self, *, status: BookStatus) -> list[BookRecord]:
        statement = (
            sa.select(*_BOOK_COLUMNS)
            .where(books.c.status == status.value)
            .order_by(books.c.created_at, books.c.title)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_book_record(row) for row in result.mappings().all()]

    async def get_by_id(self, *, book_id: UUID) -> BookRecord | None:
        async with self._session_factory() as session:
            return await _select_book(session, book_id=book_id)

    async def count_books(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(sa.select(sa.func.count()).select_from(books))
        return int(result.scalar_one())

    async def create_book(self, payload: BookCreateInput) -> BookRecord:
        book_id = uuid4()

        async with self._session_factory() as session:
            await session.execute(
                sa.insert(books).values(
                    id=book_id,
                    title=payload.title,
                    author=payload.author,
                    status=payload.status.value,
                    cover=payload.cover,
                    summary=payload.summary,
                    created_at=datetime.now(tz=UTC),
                )
            )
            await session.commit()
            created = await _select_book(session, book_id=book_id)

        assert created is not None
        return created

    async def set_status(self, *, book_id: UUID, status: BookStatus) -> BookRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                sa.update(books).where(books.c.id == book_id).values(status=status.value)
            )
            await session.commit()
            if result.rowcount == 0:
                return None
            return await _select_book(session, book_id=book_id)

    async def delete_book(self, *, book_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(sa.delete(books).where(books.c.id == book_id))
            await session.commit()
        return bool(result.rowcount)


async def _select_book(session: AsyncSession, *, book_id: UUID) -> BookRecord | None:
    statement = sa.select(*_BOOK_COLUMNS).where(books.c.id == book_id).limit(1)
    result = await session.execute(statement)
    row = result.mappings().first()
    if row is None:
        return None
    return _to_book_record(row)


def _to_book_record(row: sa.RowMapping) -> BookRecord:
    raw_book_id = row["id"]
    book_id = raw_book_id if isinstance(raw_book_id, UUID) else UUID(str(raw_book_id))
    return BookRecord(
        book_id=book_id,
        title=cast(str, row["title"]),
        author=cast(str, row["author"]),
        status=BookStatus(cast(str, row["status"])),
        cover=cast(str, row["cover"]),
        summary=cast(str, row["summary"]),
        created_at=cast(datetime, row["created_at"]),
    )
