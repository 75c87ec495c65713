"""
Logging setup for the cart service.

Usage:
    from app.utils.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from functools import cache

from app.utils.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _get_log_level() -> int:
    return getattr(logging, LOG_LEVEL, logging.INFO)


def _configure_root_logger() -> None:
    root = logging.getLogger()

    # only configure if nobody did it before us (uvicorn, pytest)
    if root.handlers:
        return

    root.setLevel(_get_log_level())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_get_log_level())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Get or create a logger with the given name (typically __name__)."""
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | None, max_length: int = 32) -> str:
    """
    Make a caller-supplied identifier safe to put in a log line.

    Control characters are escaped and the value is truncated to max_length.
    Returns "N/A" for empty values.
    """
    if not id_value:
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = ["LOG_FORMAT", "get_logger", "sanitize_id_for_logging"]
