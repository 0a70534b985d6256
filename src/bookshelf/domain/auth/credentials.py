"""Shared normalization helpers for user credential inputs."""

from __future__ import annotations

import re

DEFAULT_PASSWORD_MIN_LENGTH = 8

_EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


def is_valid_email(email: str) -> bool:
    """Return whether one email matches the accepted address format."""

    return _EMAIL_PATTERN.fullmatch(email) is not None


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank or malformed values."""

    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("email cannot be blank")
    if not is_valid_email(normalized):
        raise ValueError("email format is invalid")
    return normalized


def normalize_user_password(*, password: str) -> str:
    """Reject blank plaintext passwords, keeping the submitted value intact."""

    if not password.strip():
        raise ValueError("password cannot be blank")
    return password


def validate_new_password(
    *,
    password: str,
    min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
) -> str:
    """Apply the account-creation password policy to one plaintext password."""

    normalized = normalize_user_password(password=password)
    if len(normalized) < min_length:
        raise ValueError(f"password must contain at least {min_length} characters")
    return normalized
