"""Type registry chain - priority-ordered handler type lookup.

The TypeRegistryChain tries registries in priority order until one knows
the requested name.

Default Chain (when using .default()):
- Priority 10:  ExplicitTypeRegistry  - registered handlers
- Priority 100: ModuleLookupRegistry  - dotted path import

Usage:
    chain = TypeRegistryChain.default()
    chain.register("Greeter", Greeter)

    target = chain.resolve("Greeter")
    target = chain.resolve("myapp.shortcodes.Gallery")
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from ..logging import log_trace, log_warn

if TYPE_CHECKING:
    from .base_registry import TypeRegistry


class TypeRegistryChain:
    """Priority-ordered chain of handler type registries.

    Attributes:
        registries: List of registries in priority order.
    """

    def __init__(self) -> None:
        """Initialize an empty chain."""
        self._registries: list[TypeRegistry] = []
        self._registries_by_name: dict[str, TypeRegistry] = {}
        self._lock = threading.RLock()

    @classmethod
    def default(cls) -> TypeRegistryChain:
        """Create a chain with the default registries.

        Returns:
            Chain with ExplicitTypeRegistry + ModuleLookupRegistry.
        """
        from .registries import ExplicitTypeRegistry, ModuleLookupRegistry

        chain = cls()
        chain.add_registry(ExplicitTypeRegistry())
        chain.add_registry(ModuleLookupRegistry())
        return chain

    def add_registry(self, registry: TypeRegistry) -> TypeRegistryChain:
        """Add a registry to the chain.

        Registries are kept sorted by priority (lower = first).

        Args:
            registry: Registry to add.

        Returns:
            Self for method chaining.
        """
        with self._lock:
            self._registries.append(registry)
            self._registries.sort(key=lambda r: r.priority)
            self._registries_by_name[registry.name] = registry
        return self

    def remove_registry(self, name: str) -> TypeRegistry | None:
        """Remove a registry by name.

        Returns:
            Removed registry or None if not found.
        """
        with self._lock:
            registry = self._registries_by_name.pop(name, None)
            if registry:
                self._registries.remove(registry)
            return registry

    def get_registry(self, name: str) -> TypeRegistry | None:
        return self._registries_by_name.get(name)

    @property
    def explicit_registry(self) -> TypeRegistry | None:
        """Get the explicit registry (convenience accessor)."""
        return self._registries_by_name.get("explicit")

    def register(self, type_name: str, target: Any) -> TypeRegistryChain:
        """Register a handler on the explicit registry.

        Args:
            type_name: Name matched against the configuration.
            target: Handler class or callable.

        Returns:
            Self for method chaining.

        Raises:
            RuntimeError: If no ExplicitTypeRegistry in chain.
        """
        explicit = self.explicit_registry
        if explicit is None:
            raise RuntimeError("No ExplicitTypeRegistry in chain")

        explicit.register(type_name, target)  # type: ignore[attr-defined]
        return self

    def resolve(self, type_name: str) -> Any | None:
        """Find a class or function by name.

        A registry that raises is logged and skipped.

        Args:
            type_name: Fully qualified handler name.

        Returns:
            The class or function, or None.
        """
        for registry in self._registries:
            try:
                if not registry.can_resolve(type_name):
                    continue
                target = registry.resolve(type_name)
            except Exception as e:
                log_warn(f"TypeRegistryChain: Registry '{registry.name}' failed on '{type_name}': {e}")
                continue

            if target is not None:
                log_trace(f"TypeRegistryChain: Found '{type_name}' via '{registry.name}'")
                return target

        return None

    def exists(self, type_name: str) -> bool:
        """Check whether any registry knows the name."""
        return self.resolve(type_name) is not None

    def registered_names(self) -> list[str]:
        """Get all explicitly known names across registries."""
        names: list[str] = []
        for registry in self._registries:
            names.extend(registry.registered_names())
        return sorted(set(names))

    def __len__(self) -> int:
        return len(self._registries)

    @property
    def registry_names(self) -> list[str]:
        """Get names of registries in priority order."""
        return [r.name for r in self._registries]
