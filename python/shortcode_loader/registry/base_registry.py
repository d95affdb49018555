"""Abstract base class for handler type registries.

A type registry answers one question: does a class or function exist
under this name? Registries are tried in priority order by the
TypeRegistryChain until one knows the name.

Registry Contract:
1. name - Human-readable identifier for logging/debugging
2. priority - Lower numbers = tried first (10 = explicit, 100 = import lookup)
3. can_resolve() - Quick check if this registry might know the name
4. resolve() - Return the class/function or None

Example Implementation:
    class PluginRegistry(TypeRegistry):
        @property
        def name(self) -> str:
            return "plugins"

        @property
        def priority(self) -> int:
            return 50

        def can_resolve(self, type_name: str) -> bool:
            return type_name.startswith("plugins.")

        def resolve(self, type_name: str) -> Any | None:
            return PLUGINS.get(type_name)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class TypeRegistry(ABC):
    """Abstract base class for handler type registries."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this registry (for logging/debugging).

        Returns:
            The registry name.
        """
        ...

    @property
    @abstractmethod
    def priority(self) -> int:
        """Resolution priority (lower = tried first).

        Standard priorities:
        - 10: Explicit registrations
        - 100: Import lookup (inferential)

        Returns:
            The priority value.
        """
        ...

    @abstractmethod
    def can_resolve(self, type_name: str) -> bool:
        """Quick eligibility check (called before resolve).

        Args:
            type_name: Fully qualified handler name.

        Returns:
            True if this registry might know the name.
        """
        ...

    @abstractmethod
    def resolve(self, type_name: str) -> Any | None:
        """Look up a class or function by name.

        Args:
            type_name: Fully qualified handler name.

        Returns:
            The class or function, or None if unknown.
        """
        ...

    def registered_names(self) -> list[str]:
        """Return all names this registry knows about.

        Used for debugging and introspection.

        Returns:
            List of registered names.
        """
        return []
