"""Cache tiers for the configuration resolver.

Built-in tiers:
- MemoryCacheTier: in-process fast tier (optional TTL support)
- FileCacheTier: durable tier storing JSON entries on disk
- NullCacheTier: disabled tier (always misses, drops writes)

Custom tiers extend CacheTier:

    from shortcode_loader.cache import CacheTier

    class RedisCacheTier(CacheTier):
        @property
        def name(self):
            return "redis"

        def get(self, key): ...
        def set(self, key, value, ttl=None): ...
        def delete(self, key): ...
"""

from __future__ import annotations

from .base import NO_EXPIRY, CacheTier
from .file import DurableCacheEntry, FileCacheTier
from .memory import MemoryCacheTier, NullCacheTier

__all__ = [
    "NO_EXPIRY",
    "CacheTier",
    "MemoryCacheTier",
    "NullCacheTier",
    "FileCacheTier",
    "DurableCacheEntry",
]
