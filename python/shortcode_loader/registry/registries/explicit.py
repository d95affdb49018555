"""Explicit type registry (priority 10).

Handles names registered at startup with exact key matching. This is the
registry to use for handlers that do not live at an importable path, and
for hosts that prefer not to import arbitrary modules named in a
configuration file.

Example:
    >>> registry = ExplicitTypeRegistry()
    >>> registry.register("Greeter", Greeter)
    >>> registry.resolve("Greeter") is Greeter
    True
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from ...logging import log_debug, log_warn
from ..base_registry import TypeRegistry


class ExplicitTypeRegistry(TypeRegistry):
    """Registry for explicitly registered handler types.

    Priority 10 - checked first in the default chain.

    Supports registering handler classes and plain functions. Thread-safe
    for concurrent registration and lookup.
    """

    def __init__(self, name: str = "explicit") -> None:
        """Initialize the registry.

        Args:
            name: Registry name for identification.
        """
        self._name = name
        self._types: dict[str, Any] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        """Return the registry name."""
        return self._name

    @property
    def priority(self) -> int:
        """Return the registry priority (10 = highest)."""
        return 10

    def can_resolve(self, type_name: str) -> bool:
        return type_name in self._types

    def resolve(self, type_name: str) -> Any | None:
        return self._types.get(type_name)

    def register(self, type_name: str, target: Any) -> None:
        """Register a handler class or function.

        Args:
            type_name: Fully qualified name matched against the configuration.
            target: Handler class or callable.

        Raises:
            TypeError: If target is neither a class nor callable.
        """
        if not callable(target):
            raise TypeError(f"Handler for '{type_name}' must be a class or callable, got {target!r}")

        with self._lock:
            if type_name in self._types:
                log_warn(f"Overwriting existing handler type: {type_name}")
            self._types[type_name] = target
        log_debug(f"Registered handler type: {type_name} -> {getattr(target, '__name__', target)}")

    def handler(self, type_name: str | None = None) -> Callable[[Any], Any]:
        """Decorator form of register().

        Args:
            type_name: Name to register under. Defaults to the target's __name__.

        Example:
            >>> @registry.handler("App.Widget")
            ... class Widget:
            ...     def get_html(self, *args):
            ...         return "<div></div>"
        """

        def decorator(target: Any) -> Any:
            self.register(type_name or target.__name__, target)
            return target

        return decorator

    def unregister(self, type_name: str) -> bool:
        """Unregister a name.

        Returns:
            True if the name was removed, False if not found.
        """
        with self._lock:
            if type_name in self._types:
                del self._types[type_name]
                return True
            return False

    def registered_names(self) -> list[str]:
        return list(self._types.keys())
