"""SQLAlchemy adapter for user account persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bookshelf.application.ports.user_repository_port import (
    EmailAlreadyExistsError,
    UserCreateInput,
    UserPatch,
    UserRecord,
    UserRepositoryPort,
)
from bookshelf.domain.users.language import Language
from bookshelf.infrastructure.db.metadata import users

_USER_COLUMNS = (
    users.c.id,
    users.c.firstname,
    users.c.name,
    users.c.age,
    users.c.language,
    users.c.email,
    users.c.password_hash,
    users.c.is_admin,
    users.c.created_at,
    users.c.updated_at,
)


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id."""

        async with self._session_factory() as session:
            return await _select_user(session, users.c.id == user_id)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email."""

        async with self._session_factory() as session:
            return await _select_user(session, users.c.email == email)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user and translate email uniqueness violations."""

        user_id = uuid4()
        now = datetime.now(tz=UTC)

        async with self._session_factory() as session:
            try:
                await session.execute(
                    sa.insert(users).values(
                        id=user_id,
                        firstname=payload.firstname,
                        name=payload.name,
                        age=payload.age,
                        language=payload.language.value,
                        email=payload.email,
                        password_hash=payload.password_hash,
                        is_admin=payload.is_admin,
                        created_at=now,
                        updated_at=now,
                    )
                )
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                _raise_for_email_conflict(exc, email=payload.email)
                raise
            created = await _select_user(session, users.c.id == user_id)

        assert created is not None
        return created

    async def update_user(self, *, user_id: UUID, patch: UserPatch) -> UserRecord | None:
        """Apply profile fields from one patch and bump `updated_at`."""

        values: dict[str, object] = {}
        for key, value in patch.changed_fields().items():
            values[key] = value.value if isinstance(value, Language) else value
        values["updated_at"] = datetime.now(tz=UTC)

        async with self._session_factory() as session:
            try:
                result = await session.execute(
                    sa.update(users).where(users.c.id == user_id).values(**values)
                )
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                if patch.email is not None:
                    _raise_for_email_conflict(exc, email=patch.email)
                raise
            if result.rowcount == 0:
                return None
            return await _select_user(session, users.c.id == user_id)

    async def set_password_hash(self, *, user_id: UUID, password_hash: str) -> None:
        async with self._session_factory() as session:
            await session.execute(
                sa.update(users)
                .where(users.c.id == user_id)
                .values(password_hash=password_hash, updated_at=datetime.now(tz=UTC))
            )
            await session.commit()

    async def delete_user(self, *, user_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(sa.delete(users).where(users.c.id == user_id))
            await session.commit()
        return bool(result.rowcount)


def _raise_for_email_conflict(exc: IntegrityError, *, email: str) -> None:
    if "email" in str(exc.orig).lower():
        raise EmailAlreadyExistsError(email=email) from exc


async def _select_user(
    session: AsyncSession,
    condition: sa.ColumnElement[bool],
) -> UserRecord | None:
    result = await session.execute(sa.select(*_USER_COLUMNS).where(condition).limit(1))
    row = result.mappings().first()
    if row is None:
        return None
    return _to_user_record(row)


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_user_id = row["id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return UserRecord(
        user_id=user_id,
        firstname=cast(str, row["firstname"]),
        name=cast(str, row["name"]),
        age=int(row["age"]),
        language=Language(cast(str, row["language"])),
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        is_admin=bool(row["is_admin"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
