"""Application service for user registration and profile updates."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from uuid import UUID

from bookshelf.application.ports.password_hasher_port import PasswordHasherPort
from bookshelf.application.ports.user_repository_port import (
    EmailAlreadyExistsError,
    UserCreateInput,
    UserPatch,
    UserRecord,
    UserRepositoryPort,
)
from bookshelf.domain.auth.credentials import (
    DEFAULT_PASSWORD_MIN_LENGTH,
    normalize_user_email,
    validate_new_password,
)
from bookshelf.domain.users.language import DEFAULT_LANGUAGE, Language

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """Raised when a target user cannot be found."""

    def __init__(self, *, user_id: UUID) -> None:
        super().__init__(f"user not found: {user_id}")
        self.user_id = user_id


class InvalidUserEmailError(ValueError):
    """Raised when a submitted email is blank or malformed."""


class InvalidUserPasswordError(ValueError):
    """Raised when a submitted password violates the account password policy."""


class EmailAlreadyRegisteredError(ValueError):
    """Raised when another account already uses the submitted email."""

    def __init__(self, *, email: str) -> None:
        super().__init__("email already registered")
        self.email = email


class NoUserChangesError(ValueError):
    """Raised when a profile patch does not change any stored value."""

    def __init__(self) -> None:
        super().__init__("no profile changes to apply")


@dataclass(frozen=True)
class UserRegistrationRequest:
    """Plaintext account-creation input accepted by the service layer."""

    firstname: str
    name: str
    age: int
    email: str
    password: str
    language: Language = DEFAULT_LANGUAGE
    is_admin: bool = False


class UserService:
    """Register accounts and apply profile patches."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
        password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._password_min_length = password_min_length

    async def register_user(self, *, payload: UserRegistrationRequest) -> UserRecord:
        """Validate credentials, hash the password and persist a new account."""

        email = _normalize_email(payload.email)
        try:
            password = validate_new_password(
                password=payload.password,
                min_length=self._password_min_length,
            )
        except ValueError as exc:
            raise InvalidUserPasswordError(str(exc)) from exc

        if await self._users.get_by_email(email=email) is not None:
            raise EmailAlreadyRegisteredError(email=email)

        password_hash = await asyncio.to_thread(self._password_hasher.hash_password, password)
        try:
            created = await self._users.create_user(
                UserCreateInput(
                    firstname=payload.firstname,
                    name=payload.name,
                    age=payload.age,
                    language=payload.language,
                    email=email,
                    password_hash=password_hash,
                    is_admin=payload.is_admin,
                )
            )
        except EmailAlreadyExistsError as exc:
            raise EmailAlreadyRegisteredError(email=email) from exc

        logger.info("user_registered user_id=%s", created.user_id)
        return created

    async def update_user(self, *, user_id: UUID, patch: UserPatch) -> UserRecord:
        """Apply changed profile fields or raise when nothing would change."""

        current = await self._users.get_by_id(user_id=user_id)
        if current is None:
            raise UserNotFoundError(user_id=user_id)

        if patch.email is not None:
            patch = replace(patch, email=_normalize_email(patch.email))

        effective = _drop_unchanged_fields(patch=patch, current=current)
        if not effective.changed_fields():
            raise NoUserChangesError()

        try:
            updated = await self._users.update_user(user_id=user_id, patch=effective)
        except EmailAlreadyExistsError as exc:
            raise EmailAlreadyRegisteredError(email=exc.email) from exc
        if updated is None:  # pragma: no cover - removed between read and write.
            raise UserNotFoundError(user_id=user_id)

        logger.info(
            "user_updated user_id=%s fields=%s",
            user_id,
            ",".join(sorted(effective.changed_fields())),
        )
        return updated


def _normalize_email(email: str) -> str:
    try:
        return normalize_user_email(email=email)
    except ValueError as exc:
        raise InvalidUserEmailError(str(exc)) from exc


def _drop_unchanged_fields(*, patch: UserPatch, current: UserRecord) -> UserPatch:
    changed = {
        key: value
        for key, value in patch.changed_fields().items()
        if getattr(current, key) != value
    }
    return UserPatch(**changed)  # type: ignore[arg-type]
