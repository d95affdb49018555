"""Shortcode definition type for handler binding.

This module defines the ShortcodeDefinition dataclass that carries one
``shortcodes`` entry of the configuration together with the namespace it
is scoped by.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ShortcodeDefinition:
    """One shortcode entry of the configuration.

    Attributes:
        name: Shortcode name (the tag users write).
        specifier: Handler class or function name from the configuration.
        namespace: Optional namespace scoping unqualified specifiers.

    Example:
        >>> definition = ShortcodeDefinition("greet", "Greeter", namespace="App")
        >>> definition.candidate_names()
        ['Greeter', 'App.Greeter']
    """

    name: str
    specifier: Any
    namespace: str = ""

    def has_valid_specifier(self) -> bool:
        """Check the specifier is a non-empty string."""
        return isinstance(self.specifier, str) and len(self.specifier) > 0

    def namespaced_specifier(self, separator: str = ".") -> str | None:
        """Return ``namespace + separator + specifier``, or None without a namespace."""
        if not self.namespace or not self.has_valid_specifier():
            return None
        return f"{self.namespace}{separator}{self.specifier}"

    def candidate_names(self, separator: str = ".") -> list[str]:
        """Return the names to look up, in resolution order.

        The bare specifier always comes first; the namespaced form is only
        tried when a namespace is configured.

        Args:
            separator: Namespace separator.

        Returns:
            Candidate names (empty when the specifier is not a string).
        """
        if not self.has_valid_specifier():
            return []

        names = [self.specifier]
        namespaced = self.namespaced_specifier(separator)
        if namespaced is not None:
            names.append(namespaced)
        return names
