"""Abstract base class for cache tiers.

A cache tier is a key-value store the resolver reads candidates from and
repairs after a resolution. Tiers are injected into the resolver; the
resolver never owns their lifecycle.

Contract:
1. get() - Return the stored value or None when absent/expired
2. set() - Store a value; ttl=NO_EXPIRY (0) or None means "never expire"
3. delete() - Remove a key; deleting an absent key is not an error

Backend failures are raised as CacheBackendError. The resolver treats
them as fetcher failures on reads and logs them on writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

# TTL sentinel meaning "never expire"
NO_EXPIRY = 0


class CacheTier(ABC):
    """Abstract base class for cache tiers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this tier (for logging/debugging).

        Returns:
            The tier name.
        """
        ...

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Fetch a value.

        Args:
            key: Cache key.

        Returns:
            The stored value, or None if absent or expired.

        Raises:
            CacheBackendError: If the backend cannot be read.
        """
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store a value.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Seconds until expiry. None or NO_EXPIRY never expires.
                Tiers without expiry support ignore it.

        Raises:
            CacheBackendError: If the backend cannot be written.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a value.

        Args:
            key: Cache key.

        Returns:
            True if an entry was removed, False if it was already absent.

        Raises:
            CacheBackendError: If the backend cannot be modified.
        """
        ...

    @property
    def enabled(self) -> bool:
        """Whether this tier actually stores anything."""
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
