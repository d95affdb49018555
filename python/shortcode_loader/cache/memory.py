"""In-process cache tiers.

MemoryCacheTier is the default fast tier: a process-wide dictionary that
behaves like a shared object cache. It also honours TTLs so it can stand
in for the durable tier in tests and single-process deployments.

NullCacheTier is a disabled tier: every read misses and writes are
dropped.
"""

from __future__ import annotations

import copy
import threading
import time
from collections.abc import Callable
from typing import Any

from .base import NO_EXPIRY, CacheTier


class MemoryCacheTier(CacheTier):
    """Thread-safe in-memory cache tier.

    Values are deep-copied on the way in and out so callers cannot mutate
    a cached configuration in place.

    Example:
        >>> cache = MemoryCacheTier()
        >>> cache.set("shortcode-config", {"shortcodes": {}})
        >>> cache.get("shortcode-config")
        {'shortcodes': {}}
    """

    def __init__(
        self,
        name: str = "memory",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the tier.

        Args:
            name: Tier name for identification.
            clock: Monotonic clock used for TTL expiry.
        """
        self._name = name
        self._clock = clock
        self._entries: dict[str, tuple[Any, float | None]] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        """Return the tier name."""
        return self._name

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                return None

            return copy.deepcopy(value)

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = None
        if ttl is not None and ttl != NO_EXPIRY:
            expires_at = self._clock() + ttl

        with self._lock:
            self._entries[key] = (copy.deepcopy(value), expires_at)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        """Return the stored keys (expired entries included until read)."""
        with self._lock:
            return list(self._entries.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class NullCacheTier(CacheTier):
    """Cache tier that stores nothing."""

    def __init__(self, name: str = "null") -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def enabled(self) -> bool:
        return False

    def get(self, key: str) -> Any | None:
        return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        return None

    def delete(self, key: str) -> bool:
        return False
