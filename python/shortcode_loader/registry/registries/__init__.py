"""Built-in type registry implementations.

- ExplicitTypeRegistry (priority 10): Names registered at startup
- ModuleLookupRegistry (priority 100): Dotted path import via importlib
"""

from __future__ import annotations

from .explicit import ExplicitTypeRegistry
from .module_lookup import ModuleLookupRegistry

__all__ = [
    "ExplicitTypeRegistry",
    "ModuleLookupRegistry",
]
