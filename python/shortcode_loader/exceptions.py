"""Custom exceptions for the shortcode loader.

This module provides a hierarchy of exceptions raised by the loader's
collaborators (settings, config source, cache tiers). None of them escape
``ConfigResolver.resolve()`` or ``HandlerBinder.bind()``; they are caught at
the fetcher and binding boundaries and turned into degraded results.
"""

from __future__ import annotations


class ShortcodeLoaderError(Exception):
    """Base exception for all shortcode loader errors.

    Example:
        >>> try:
        ...     source.load()
        ... except ShortcodeLoaderError as e:
        ...     print(f"Loader error: {e}")
    """

    pass


class ConfigurationError(ShortcodeLoaderError):
    """Raised when loader settings are invalid.

    Example:
        >>> try:
        ...     settings = LoaderSettings.from_env()
        ... except ConfigurationError as e:
        ...     print(f"Bad settings: {e}")
    """

    pass


class ConfigSourceError(ShortcodeLoaderError):
    """Raised when the shortcode configuration cannot be read.

    Common causes:
    - The configuration file does not exist or is unreadable
    - An http(s) source answered with a non-2xx status
    - The location uses an unsupported stream scheme

    Attributes:
        location: The file path or URL that failed.
    """

    def __init__(self, message: str, location: str | None = None) -> None:
        super().__init__(message)
        self.location = location


class ConfigParseError(ConfigSourceError):
    """Raised when the configuration content is not valid YAML."""

    pass


class CacheBackendError(ShortcodeLoaderError):
    """Raised when a cache tier fails to read, write or delete an entry.

    Attributes:
        key: The cache key involved in the failed operation.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


__all__ = [
    "ShortcodeLoaderError",
    "ConfigurationError",
    "ConfigSourceError",
    "ConfigParseError",
    "CacheBackendError",
]
