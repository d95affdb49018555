"""File-backed durable cache tier.

Each key is stored as one JSON document in a cache directory, wrapped in a
DurableCacheEntry that records its expiry. Writes go through a temporary
file and an atomic rename so concurrent resolvers never observe a partial
entry; last writer wins.

Example:
    >>> cache = FileCacheTier(Path("/var/cache/shortcodes"))
    >>> cache.set("vendi-shortcode-config", {"shortcodes": {}}, ttl=NO_EXPIRY)
    >>> cache.get("vendi-shortcode-config")
    {'shortcodes': {}}
"""

from __future__ import annotations

import hashlib
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..exceptions import CacheBackendError
from ..logging import log_debug
from .base import NO_EXPIRY, CacheTier


class DurableCacheEntry(BaseModel):
    """On-disk representation of one cached value."""

    key: str
    value: Any = None
    expires_at: float | None = Field(
        default=None,
        description="Wall-clock expiry as a UNIX timestamp, None for never.",
    )

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class FileCacheTier(CacheTier):
    """Durable cache tier storing entries as JSON files.

    Attributes:
        directory: Directory holding the entry files. Created on first write.
    """

    SUFFIX = ".json"

    def __init__(
        self,
        directory: Path | str,
        name: str = "file",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the tier.

        Args:
            directory: Directory holding the entry files.
            name: Tier name for identification.
            clock: Wall-clock used for TTL expiry.
        """
        self.directory = Path(directory)
        self._name = name
        self._clock = clock

    @property
    def name(self) -> str:
        """Return the tier name."""
        return self._name

    def path_for(self, key: str) -> Path:
        """Return the file path used for a key.

        Keys are hashed so arbitrary strings map to safe file names.
        """
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{self.SUFFIX}"

    def get(self, key: str) -> Any | None:
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise CacheBackendError(f"Failed to read cache entry: {e}", key=key) from e

        try:
            entry = DurableCacheEntry.model_validate_json(raw)
        except ValidationError as e:
            raise CacheBackendError(f"Corrupt cache entry: {e}", key=key) from e

        if entry.is_expired(self._clock()):
            log_debug(f"Durable cache entry expired: {key}", {"cache_key": key})
            self.delete(key)
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = None
        if ttl is not None and ttl != NO_EXPIRY:
            expires_at = self._clock() + ttl

        entry = DurableCacheEntry(key=key, value=value, expires_at=expires_at)
        path = self.path_for(key)

        try:
            payload = entry.model_dump_json()
        except (ValueError, TypeError) as e:
            raise CacheBackendError(f"Value is not serializable: {e}", key=key) from e

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CacheBackendError(f"Failed to write cache entry: {e}", key=key) from e

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CacheBackendError(f"Failed to delete cache entry: {e}", key=key) from e
        return True
