"""Logging configuration helpers."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "PRNOTIFY_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name (CLI flag, then ``PRNOTIFY_LOG_LEVEL``) to a logging constant."""
    raw = level or os.environ.get(LOG_LEVEL_ENV) or "INFO"
    resolved = logging.getLevelName(raw.strip().upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=resolve_log_level(level), format=LOG_FORMAT)
