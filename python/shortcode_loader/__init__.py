"""
Shortcode Loader

This package resolves named shortcode handlers from a YAML configuration,
with a tiered cache (fast cache, durable cache, source file) in front of
the file parse, and binds each configured shortcode to a callable.

Example:
    >>> import shortcode_loader
    >>> from shortcode_loader import ShortcodeLoader, LoaderSettings
    >>>
    >>> loader = ShortcodeLoader(LoaderSettings(base_dir="/srv/theme"))
    >>> loader.registry.register("Greeter", Greeter)
    >>>
    >>> # Resolve the configuration and bind every shortcode
    >>> bindings = loader.create_objects()
    >>> bindings["greet"]()
    '<p>Hello</p>'

    >>> # Or hand them straight to the host's registration function
    >>> loader.register_all(add_shortcode)

    >>> # Observe resolution
    >>> from shortcode_loader import EventBridge, EventNames
    >>> bridge = EventBridge.instance()
    >>> bridge.start()
    >>> bridge.subscribe(EventNames.CONFIG_RESOLVED, lambda report: print(report.winner))
"""

from __future__ import annotations

from shortcode_loader.cache import (
    NO_EXPIRY,
    CacheTier,
    FileCacheTier,
    MemoryCacheTier,
    NullCacheTier,
)
from shortcode_loader.event_bridge import EventBridge, EventNames
from shortcode_loader.exceptions import (
    CacheBackendError,
    ConfigParseError,
    ConfigSourceError,
    ConfigurationError,
    ShortcodeLoaderError,
)
from shortcode_loader.loader import ShortcodeLoader, shared_fast_cache
from shortcode_loader.logging import (
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from shortcode_loader.registry import (
    ExplicitTypeRegistry,
    HandlerBinder,
    MethodDispatchWrapper,
    MissingHandler,
    ModuleLookupRegistry,
    ShortcodeDefinition,
    TypeRegistry,
    TypeRegistryChain,
)
from shortcode_loader.resolver import ConfigResolver, Fetcher, FetchResult, is_config_valid
from shortcode_loader.source import ConfigSource
from shortcode_loader.types import (
    FetcherName,
    FetcherOutcome,
    FetchStatus,
    LoaderSettings,
    LogContext,
    ResolutionReport,
)

__version__ = "0.1.0"


def version() -> str:
    """Return the package version."""
    return __version__


__all__ = [
    # Version
    "__version__",
    "version",
    # Loader facade
    "ShortcodeLoader",
    "shared_fast_cache",
    # Configuration resolution
    "ConfigResolver",
    "ConfigSource",
    "Fetcher",
    "FetchResult",
    "is_config_valid",
    # Cache tiers
    "NO_EXPIRY",
    "CacheTier",
    "MemoryCacheTier",
    "FileCacheTier",
    "NullCacheTier",
    # Handler binding
    "HandlerBinder",
    "ShortcodeDefinition",
    "TypeRegistry",
    "TypeRegistryChain",
    "ExplicitTypeRegistry",
    "ModuleLookupRegistry",
    "MethodDispatchWrapper",
    "MissingHandler",
    # Types
    "FetcherName",
    "FetcherOutcome",
    "FetchStatus",
    "LoaderSettings",
    "LogContext",
    "ResolutionReport",
    # Events
    "EventBridge",
    "EventNames",
    # Exceptions
    "ShortcodeLoaderError",
    "ConfigurationError",
    "ConfigSourceError",
    "ConfigParseError",
    "CacheBackendError",
    # Logging
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
