"""Shared logging configuration for the API process."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# SQL echo at INFO includes bound parameters such as password hashes.
_SQL_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def configure_logging(*, level: str) -> None:
    """Configure process logging with consistent format and runtime level."""

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)

    logging.basicConfig(
        level=resolved_level,
        format=_LOG_FORMAT,
    )
    if resolved_level > logging.DEBUG:
        for name in _SQL_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
