"""Process logging setup shared by the API and seed entrypoints."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_REDUNDANT_LOGGERS = ("uvicorn.access",)


def resolve_log_level(level: str) -> int:
    """Map a textual level name to a logging constant, defaulting to INFO."""

    normalized_level = level.strip().upper() or "INFO"
    resolved = logging.getLevelName(normalized_level)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str) -> None:
    """Configure root logging format and level for one process."""

    logging.basicConfig(level=resolve_log_level(level), format=_LOG_FORMAT)
    for logger_name in _REDUNDANT_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
