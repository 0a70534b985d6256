"""Password hashing adapters: canonical PBKDF2 scheme and legacy bcrypt verification.

Stored credential records use the layout ``base64(salt || derived_key)`` where
the salt is 16 random bytes and the derived key is 32 bytes of
PBKDF2-HMAC-SHA256 output. The iteration count is not embedded in the record,
so it must stay stable for the lifetime of the stored hashes.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import secrets
from collections.abc import Sequence

import bcrypt

from bookshelf.application.ports.password_hasher_port import PasswordHasherPort

SALT_LENGTH = 16
DERIVED_KEY_LENGTH = 32
DEFAULT_ITERATIONS = 100_000
HASH_NAME = "sha256"

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def constant_time_equals(left: Sequence[int], right: Sequence[int]) -> bool:
    """Compare two byte buffers without short-circuiting on the first difference."""

    if len(left) != len(right):
        return False

    difference = 0
    for index in range(len(left)):
        difference |= left[index] ^ right[index]
    return difference == 0


def is_bcrypt_hash(password_hash: str) -> bool:
    """Return whether a stored record uses the bcrypt modular-crypt format."""

    return password_hash.startswith(_BCRYPT_PREFIXES)


class Pbkdf2PasswordHasher(PasswordHasherPort):
    """Salted PBKDF2-HMAC-SHA256 password hasher."""

    def __init__(self, *, iterations: int = DEFAULT_ITERATIONS) -> None:
        if iterations < 1:
            raise ValueError("iterations must be positive")
        self._iterations = iterations

    @property
    def iterations(self) -> int:
        return self._iterations

    def hash_password(self, password: str) -> str:
        if not password:
            raise ValueError("password cannot be empty")

        salt = secrets.token_bytes(SALT_LENGTH)
        derived_key = self._derive(password=password, salt=salt)
        return base64.b64encode(salt + derived_key).decode("ascii")

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        try:
            decoded = base64.b64decode(password_hash, validate=True)
        except (binascii.Error, ValueError):
            return False

        if len(decoded) != SALT_LENGTH + DERIVED_KEY_LENGTH:
            return False

        salt = decoded[:SALT_LENGTH]
        stored_key = decoded[SALT_LENGTH:]
        candidate_key = self._derive(password=password, salt=salt)
        return constant_time_equals(stored_key, candidate_key)

    def needs_rehash(self, password_hash: str) -> bool:
        return False

    def _derive(self, *, password: str, salt: bytes) -> bytes:
        return hashlib.pbkdf2_hmac(
            HASH_NAME,
            password.encode("utf-8"),
            salt,
            self._iterations,
            dklen=DERIVED_KEY_LENGTH,
        )


class BcryptLegacyPasswordVerifier:
    """Verify records written by the earlier bcrypt-based revision."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False


class MigratingPasswordHasher(PasswordHasherPort):
    """Hash with PBKDF2 and keep verifying legacy bcrypt records until upgraded."""

    def __init__(
        self,
        *,
        primary: Pbkdf2PasswordHasher,
        legacy: BcryptLegacyPasswordVerifier | None = None,
    ) -> None:
        self._primary = primary
        self._legacy = legacy or BcryptLegacyPasswordVerifier()

    def hash_password(self, password: str) -> str:
        return self._primary.hash_password(password)

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        if is_bcrypt_hash(password_hash):
            return self._legacy.verify_password(password=password, password_hash=password_hash)
        return self._primary.verify_password(password=password, password_hash=password_hash)

    def needs_rehash(self, password_hash: str) -> bool:
        return is_bcrypt_hash(password_hash)


def build_password_hasher(*, iterations: int = DEFAULT_ITERATIONS) -> MigratingPasswordHasher:
    """Build the runtime password hasher for the configured iteration count."""

    return MigratingPasswordHasher(primary=Pbkdf2PasswordHasher(iterations=iterations))
