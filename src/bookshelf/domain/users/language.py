"""Preferred interface languages supported for user accounts."""

from __future__ import annotations

from enum import StrEnum


class Language(StrEnum):
    """Supported user languages."""

    FR = "fr"
    EN = "en"
    DE = "de"
    IT = "it"


DEFAULT_LANGUAGE = Language.FR
