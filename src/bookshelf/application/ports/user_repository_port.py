"""Port for user persistence operations used by account and auth services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from bookshelf.domain.users.language import Language


@dataclass(frozen=True)
class UserRecord:
    """User persistence model."""

    user_id: UUID
    firstname: str
    name: str
    age: int
    language: Language
    email: str
    password_hash: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserCreateInput:
    """Insert payload for one new user row."""

    firstname: str
    name: str
    age: int
    language: Language
    email: str
    password_hash: str
    is_admin: bool = False


@dataclass(frozen=True)
class UserPatch:
    """Partial profile update with one optional field per patchable attribute."""

    firstname: str | None = None
    name: str | None = None
    age: int | None = None
    language: Language | None = None
    email: str | None = None

    def changed_fields(self) -> dict[str, object]:
        """Return only the attributes explicitly set on this patch."""

        values: dict[str, object] = {
            "firstname": self.firstname,
            "name": self.name,
            "age": self.age,
            "language": self.language,
            "email": self.email,
        }
        return {key: value for key, value in values.items() if value is not None}


class EmailAlreadyExistsError(ValueError):
    """Raised by repositories when a unique email constraint is violated."""

    def __init__(self, *, email: str) -> None:
        super().__init__(f"email already registered: {email}")
        self.email = email


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user with a freshly generated id."""

    async def update_user(self, *, user_id: UUID, patch: UserPatch) -> UserRecord | None:
        """Apply one profile patch and return the updated row, or None when missing."""

    async def set_password_hash(self, *, user_id: UUID, password_hash: str) -> None:
        """Replace the stored credential record of one user."""

    async def delete_user(self, *, user_id: UUID) -> bool:
        """Delete one user and return whether a row was removed."""
