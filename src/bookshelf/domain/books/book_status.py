"""Reading status values for books on the shelf."""

from __future__ import annotations

from enum import StrEnum


class BookStatus(StrEnum):
    """Supported reading states for one book."""

    READ = "read"
    TO_READ = "to-read"
    PENDING = "pending"
