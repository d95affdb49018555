"""Shortcode loader facade.

The ShortcodeLoader wires the ConfigResolver and the HandlerBinder
together and hands the resulting callables to the host's registration
function.

Example:
    >>> from shortcode_loader import ShortcodeLoader
    >>>
    >>> loader = ShortcodeLoader.from_env()
    >>> loader.registry.register("Greeter", Greeter)
    >>> count = loader.register_all(plugin_system.add_shortcode)
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

from .cache import CacheTier, FileCacheTier, MemoryCacheTier
from .event_bridge import EventBridge
from .logging import log_info
from .registry import HandlerBinder, TypeRegistryChain
from .resolver import ConfigResolver
from .source import ConfigSource
from .types import LoaderSettings, ResolutionReport

# Process-wide fast tier shared by loaders that are not given one
_shared_fast_cache = MemoryCacheTier(name="shared")


def shared_fast_cache() -> MemoryCacheTier:
    """Return the process-wide fast cache tier."""
    return _shared_fast_cache


class ShortcodeLoader:
    """Resolves the configuration and binds its shortcodes.

    Loaders built without a fast tier share shared_fast_cache(), keyed by
    ``settings.fast_cache_key`` alone. Two such loaders reading different
    configuration files therefore serve each other's cached configuration
    unless each one is given its own ``fast_cache_key`` or ``fast_cache``.

    Attributes:
        settings: Loader settings.
        resolver: The configuration resolver.
        binder: The handler binder.
    """

    def __init__(
        self,
        settings: LoaderSettings | None = None,
        fast_cache: CacheTier | None = None,
        durable_cache: CacheTier | None = None,
        source: ConfigSource | None = None,
        registry: TypeRegistryChain | None = None,
        event_bridge: EventBridge | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            settings: Loader settings. Defaults to LoaderSettings().
            fast_cache: Fast tier. Defaults to the process-wide MemoryCacheTier
                (shared with every other loader that omits it).
            durable_cache: Durable tier. Optional.
            source: Source of truth. Defaults to ConfigSource(settings).
            registry: Type registry chain. Defaults to TypeRegistryChain.default().
            event_bridge: Bridge for notifications. Defaults to the singleton.
        """
        self.settings = settings or LoaderSettings()
        self.resolver = ConfigResolver(
            fast_cache=fast_cache if fast_cache is not None else shared_fast_cache(),
            durable_cache=durable_cache,
            source=source if source is not None else ConfigSource(self.settings),
            settings=self.settings,
            event_bridge=event_bridge,
        )
        self.binder = HandlerBinder(
            registry=registry,
            separator=self.settings.namespace_separator,
            event_bridge=event_bridge,
        )
        self.last_report: ResolutionReport | None = None

    @classmethod
    def from_env(
        cls,
        durable_cache_dir: str | None = None,
        **kwargs: Any,
    ) -> ShortcodeLoader:
        """Build a loader from environment variables.

        Args:
            durable_cache_dir: Directory for a FileCacheTier. Falls back to
                SHORTCODE_DURABLE_CACHE_DIR; no durable tier when neither is set.
            **kwargs: Passed through to the constructor.

        Raises:
            ConfigurationError: If the environment holds invalid settings.
        """
        settings = kwargs.pop("settings", None) or LoaderSettings.from_env()
        cache_dir = durable_cache_dir or os.environ.get("SHORTCODE_DURABLE_CACHE_DIR")
        if cache_dir and "durable_cache" not in kwargs:
            kwargs["durable_cache"] = FileCacheTier(cache_dir, name="durable")
        return cls(settings=settings, **kwargs)

    @property
    def registry(self) -> TypeRegistryChain:
        return self.binder.registry

    def get_config(self) -> dict[str, Any]:
        """Resolve the configuration (empty on total miss)."""
        config, self.last_report = self.resolver.resolve_with_report()
        return config

    def create_objects(self) -> dict[str, Callable[..., Any]]:
        """Resolve the configuration and bind every shortcode."""
        return self.binder.bind(self.get_config())

    def register_all(self, register: Callable[[str, Callable[..., Any]], Any]) -> int:
        """Register every bound shortcode with the host.

        Args:
            register: Host registration function taking (name, callable).

        Returns:
            Number of shortcodes registered.
        """
        bindings = self.create_objects()
        for name, handler in bindings.items():
            register(name, handler)

        log_info(f"ShortcodeLoader: Registered {len(bindings)} shortcodes")
        return len(bindings)

    @classmethod
    def register_from_env(
        cls,
        register: Callable[[str, Callable[..., Any]], Any],
        **kwargs: Any,
    ) -> int:
        """Build a loader with from_env() and register every shortcode.

        Args:
            register: Host registration function taking (name, callable).
            **kwargs: Passed through to from_env().

        Returns:
            Number of shortcodes registered.
        """
        return cls.from_env(**kwargs).register_all(register)


__all__ = ["ShortcodeLoader", "shared_fast_cache"]
