from __future__ import annotations

import pytest

from bookshelf.domain.auth.credentials import (
    is_valid_email,
    normalize_user_email,
    normalize_user_password,
    validate_new_password,
)


def test_normalize_user_email_trims_and_lowercases() -> None:
    assert normalize_user_email(email="  Reader@Example.ORG ") == "reader@example.org"


@pytest.mark.parametrize("email", ["", "   ", "no-at-sign", "a@", "@example.org", "a b@c.de"])
def test_normalize_user_email_rejects_blank_and_malformed(email: str) -> None:
    with pytest.raises(ValueError):
        normalize_user_email(email=email)


def test_is_valid_email_accepts_common_addresses() -> None:
    assert is_valid_email("reader@example.org")
    assert is_valid_email("first.last+tag@sub.example.co")
    assert not is_valid_email("reader@-example.org")


def test_normalize_user_password_keeps_surrounding_whitespace() -> None:
    assert normalize_user_password(password="  secret  ") == "  secret  "


def test_normalize_user_password_rejects_blank() -> None:
    with pytest.raises(ValueError):
        normalize_user_password(password="   ")


def test_validate_new_password_enforces_minimum_length() -> None:
    assert validate_new_password(password="12345678") == "12345678"
    with pytest.raises(ValueError, match="at least 8"):
        validate_new_password(password="1234567")
    assert validate_new_password(password="abc", min_length=3) == "abc"
