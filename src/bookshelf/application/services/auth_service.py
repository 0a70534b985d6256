"""Application authentication service for credential verification."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from bookshelf.application.ports.password_hasher_port import PasswordHasherPort
from bookshelf.application.ports.user_repository_port import UserRecord, UserRepositoryPort
from bookshelf.domain.auth.credentials import normalize_user_email, normalize_user_password

logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    user: UserRecord | None = None


_INVALID = AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)
_TIMING_DUMMY_PASSWORD = "bookshelf-timing-dummy"


class AuthService:
    """Authenticate credentials for login and account deletion flows."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._dummy_hash: str | None = None

    async def authenticate(self, *, email: str, password: str) -> AuthResult:
        """Verify credentials; unknown email and wrong password are indistinguishable."""

        try:
            normalized_email = normalize_user_email(email=email)
            normalize_user_password(password=password)
        except ValueError:
            logger.info("login_failed reason=malformed_credentials")
            return _INVALID

        user = await self._users.get_by_email(email=normalized_email)
        if user is None:
            await asyncio.to_thread(self._verify_against_dummy, password)
            logger.info("login_failed reason=unknown_email")
            return _INVALID

        is_valid = await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=password,
            password_hash=user.password_hash,
        )
        if not is_valid:
            logger.info("login_failed reason=password_mismatch user_id=%s", user.user_id)
            return _INVALID

        if self._password_hasher.needs_rehash(user.password_hash):
            user = await self._upgrade_password_hash(user=user, password=password)

        logger.info("login_succeeded user_id=%s", user.user_id)
        return AuthResult(outcome=AuthOutcome.SUCCESS, user=user)

    async def delete_account(self, *, email: str, password: str) -> AuthResult:
        """Delete the account owning the credentials after successful verification."""

        result = await self.authenticate(email=email, password=password)
        if result.outcome is not AuthOutcome.SUCCESS or result.user is None:
            return result

        await self._users.delete_user(user_id=result.user.user_id)
        logger.info("user_deleted user_id=%s", result.user.user_id)
        return result

    def _verify_against_dummy(self, password: str) -> None:
        """Run one verification against a fixed record for emails with no account."""

        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash_password(_TIMING_DUMMY_PASSWORD)
        self._password_hasher.verify_password(password=password, password_hash=self._dummy_hash)

    async def _upgrade_password_hash(self, *, user: UserRecord, password: str) -> UserRecord:
        """Replace a legacy credential record with the canonical scheme."""

        new_hash = await asyncio.to_thread(self._password_hasher.hash_password, password)
        await self._users.set_password_hash(user_id=user.user_id, password_hash=new_hash)
        logger.info("password_hash_upgraded user_id=%s", user.user_id)
        return await self._users.get_by_id(user_id=user.user_id) or user
