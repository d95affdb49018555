"""Pydantic models for the shortcode loader.

This module provides the settings model, structured logging context and
the resolution report types shared by the resolver and the loader facade.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

# Values accepted as "enabled" for boolean environment toggles
TRUTHY_VALUES = ("1", "true", "yes", "on")


class FetcherName(str, Enum):
    """Names of the configuration fetchers, in canonical priority order."""

    CACHE = "cache"
    """Fast shared cache tier."""

    TRANSIENT = "transient"
    """Slower durable cache tier."""

    YAML = "yaml"
    """Source of truth: the YAML configuration file."""


class FetchStatus(str, Enum):
    """Outcome of a single fetcher run."""

    HIT = "hit"
    """The fetcher produced a valid configuration."""

    MISS = "miss"
    """The tier held nothing for the key."""

    INVALID = "invalid"
    """A candidate was produced but failed the shape check."""

    ERROR = "error"
    """The fetcher raised."""

    SKIPPED = "skipped"
    """The fetcher was not run because an earlier one won."""


class LoaderSettings(BaseModel):
    """Configuration for the shortcode loader.

    Example:
        >>> settings = LoaderSettings(base_dir="/srv/theme", durable_cache_enabled=True)
        >>> settings.default_config_path()
        PosixPath('/srv/theme/.config/shortcodes.yaml')
    """

    base_dir: Path | None = Field(
        default=None,
        description="Host-provided base directory. Defaults to the working directory.",
    )
    config_env_var: str = Field(
        default="SHORTCODE_YAML_FILE",
        description="Environment variable overriding the configuration location.",
    )
    default_relative_path: str = Field(
        default=".config/shortcodes.yaml",
        description="Configuration path relative to base_dir.",
    )
    fast_cache_key: str = Field(
        default="shortcode-config",
        description="Key of the configuration in the fast cache tier.",
    )
    durable_cache_key: str = Field(
        default="vendi-shortcode-config",
        description="Key of the configuration in the durable cache tier.",
    )
    durable_cache_enabled: bool = Field(
        default=False,
        description="Whether the durable cache tier is consulted on reads.",
    )
    durable_cache_ttl: int = Field(
        default=0,
        ge=0,
        description="TTL in seconds for durable cache writes (0 = never expire).",
    )
    namespace_separator: str = Field(
        default=".",
        min_length=1,
        description="Separator joining the configured namespace and a handler name.",
    )
    http_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for http(s) configuration sources.",
    )

    @field_validator("base_dir")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        return Path(os.path.expanduser(str(value)))

    def resolved_base_dir(self) -> Path:
        """Return the base directory, defaulting to the working directory."""
        return self.base_dir if self.base_dir is not None else Path.cwd()

    def default_config_path(self) -> Path:
        """Return the default configuration path under the base directory."""
        return self.resolved_base_dir() / self.default_relative_path

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> LoaderSettings:
        """Build settings from environment variables.

        Recognized variables:
        - SHORTCODE_BASE_DIR: base directory
        - SHORTCODE_DURABLE_CACHE: enable the durable tier (1/true/yes/on)
        - SHORTCODE_CACHE_KEY: fast cache key
        - SHORTCODE_DURABLE_CACHE_KEY: durable cache key
        - SHORTCODE_DURABLE_CACHE_TTL: durable TTL in seconds

        Args:
            environ: Mapping to read instead of os.environ.
            **overrides: Explicit field values that win over the environment.

        Returns:
            Validated LoaderSettings.

        Raises:
            ConfigurationError: If a value fails validation.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        if env.get("SHORTCODE_BASE_DIR"):
            values["base_dir"] = env["SHORTCODE_BASE_DIR"]
        if "SHORTCODE_DURABLE_CACHE" in env:
            values["durable_cache_enabled"] = (
                env["SHORTCODE_DURABLE_CACHE"].strip().lower() in TRUTHY_VALUES
            )
        if env.get("SHORTCODE_CACHE_KEY"):
            values["fast_cache_key"] = env["SHORTCODE_CACHE_KEY"]
        if env.get("SHORTCODE_DURABLE_CACHE_KEY"):
            values["durable_cache_key"] = env["SHORTCODE_DURABLE_CACHE_KEY"]
        if env.get("SHORTCODE_DURABLE_CACHE_TTL"):
            values["durable_cache_ttl"] = env["SHORTCODE_DURABLE_CACHE_TTL"]

        values.update(overrides)

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid loader settings: {e}") from e


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(fetcher="yaml", cache_key="shortcode-config")
        >>> log_info("Configuration loaded", context)
    """

    fetcher: str | None = Field(
        default=None,
        description="Fetcher that produced the log event.",
    )
    cache_key: str | None = Field(
        default=None,
        description="Cache key involved.",
    )
    location: str | None = Field(
        default=None,
        description="Configuration file path or URL.",
    )
    shortcode: str | None = Field(
        default=None,
        description="Shortcode name.",
    )
    error_type: str | None = Field(
        default=None,
        description="Exception class name for failures.",
    )


class FetcherOutcome(BaseModel):
    """Outcome of one fetcher within a resolution."""

    fetcher: FetcherName
    status: FetchStatus
    error: str | None = None


class ResolutionReport(BaseModel):
    """What happened during a single ``ConfigResolver.resolve()`` call.

    Attributes:
        winner: Fetcher that produced the returned configuration, or None.
        outcomes: Per-fetcher outcomes in the order they were tried.
        cache_writes: Tiers written to (by fetcher name of the tier).
        cache_purges: Cache keys deleted on total miss.
    """

    winner: FetcherName | None = None
    outcomes: list[FetcherOutcome] = Field(default_factory=list)
    cache_writes: list[FetcherName] = Field(default_factory=list)
    cache_purges: list[str] = Field(default_factory=list)

    @property
    def is_total_miss(self) -> bool:
        """True when no fetcher produced a valid configuration."""
        return self.winner is None


__all__ = [
    "FetcherName",
    "FetchStatus",
    "LoaderSettings",
    "LogContext",
    "FetcherOutcome",
    "ResolutionReport",
]
