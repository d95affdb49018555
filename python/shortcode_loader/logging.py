"""Structured logging helpers for the shortcode loader.

All records go to the ``shortcode_loader`` logger of the standard
``logging`` package. Structured fields ride along as ``record.fields`` (a
``dict[str, str]``) so a host formatter can render them however it likes.

Example:
    >>> from shortcode_loader import log_info, log_warn
    >>>
    >>> log_info("Populated caches from source", {"tiers": "transient,cache"})
    >>>
    >>> try:
    ...     source.load()
    ... except ConfigSourceError as e:
    ...     log_warn(f"Fetcher 'yaml' failed: {e}", LogContext(
    ...         fetcher="yaml",
    ...         location=e.location,
    ...     ))
"""

from __future__ import annotations

import logging
from typing import Any, Union

from .types import LogContext

LOGGER_NAME = "shortcode_loader"

# Below DEBUG; used for per-fetcher misses and per-registry lookups
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_logger = logging.getLogger(LOGGER_NAME)

Fields = Union[dict[str, Any], LogContext, None]


def get_logger() -> logging.Logger:
    """Return the ``shortcode_loader`` logger."""
    return _logger


def log_error(message: str, fields: Fields = None) -> None:
    """Log at ERROR. The loader itself never needs this level; hosts may."""
    _emit(logging.ERROR, message, fields)


def log_warn(message: str, fields: Fields = None) -> None:
    """Log at WARNING: failed fetchers, purges, fallback handlers.

    Example:
        >>> log_warn("No handler for shortcode 'gallery'", {"shortcode": "gallery"})
    """
    _emit(logging.WARNING, message, fields)


def log_info(message: str, fields: Fields = None) -> None:
    _emit(logging.INFO, message, fields)


def log_debug(message: str, fields: Fields = None) -> None:
    _emit(logging.DEBUG, message, fields)


def log_trace(message: str, fields: Fields = None) -> None:
    """Log at TRACE (5), which sits below DEBUG and is normally off."""
    _emit(TRACE, message, fields)


def _emit(level: int, message: str, fields: Fields) -> None:
    if not _logger.isEnabledFor(level):
        return
    _logger.log(level, message, extra={"fields": _stringify(fields)})


def _stringify(fields: Fields) -> dict[str, str]:
    """Flatten fields into a string-valued dict; unset LogContext fields are dropped."""
    if fields is None:
        return {}
    if isinstance(fields, LogContext):
        fields = fields.model_dump(exclude_none=True)
    return {key: str(value) for key, value in fields.items()}


__all__ = [
    "LOGGER_NAME",
    "TRACE",
    "get_logger",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
