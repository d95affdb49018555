r"""Module lookup registry (priority 100).

This registry infers handler classes and functions from dotted names
using Python's importlib: ``package.module.Name`` imports
``package.module`` and returns its ``Name`` attribute. Backslash
separated names (``App\Widget``) are treated as dotted.

Example:
    >>> registry = ModuleLookupRegistry()
    >>> registry.resolve("myapp.shortcodes.Greeter")
    <class 'myapp.shortcodes.Greeter'>
"""

from __future__ import annotations

import importlib
import re
from typing import Any

from ...logging import log_debug
from ..base_registry import TypeRegistry


class ModuleLookupRegistry(TypeRegistry):
    """Registry that imports handlers from dotted paths.

    Priority 100 - checked last in the default chain (inferential).

    Only names that look like ``module.path.Name`` are eligible. Import
    failures of any kind resolve to None.
    """

    NAME_PATTERN = re.compile(
        r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)*\.[a-zA-Z_][a-zA-Z0-9_]*$"
    )

    @property
    def name(self) -> str:
        """Return the registry name."""
        return "module_lookup"

    @property
    def priority(self) -> int:
        """Return the registry priority (100 = inferential)."""
        return 100

    def can_resolve(self, type_name: str) -> bool:
        return bool(self.NAME_PATTERN.match(self._normalize(type_name)))

    def resolve(self, type_name: str) -> Any | None:
        dotted = self._normalize(type_name)
        if not self.NAME_PATTERN.match(dotted):
            return None

        module_path, attr_name = dotted.rsplit(".", 1)

        try:
            module = importlib.import_module(module_path)
        except ImportError:
            # Module not found - expected for names that are not import paths
            return None
        except Exception as e:
            # Broken module (syntax error, failing import-time code); explicit
            # registration should be used for handlers that must load
            log_debug(f"ModuleLookupRegistry: Importing '{module_path}' failed: {e}")
            return None

        target = getattr(module, attr_name, None)
        if target is None:
            return None

        if not callable(target):
            return None

        return target

    @staticmethod
    def _normalize(type_name: str) -> str:
        return type_name.replace("\\", ".").strip(".")
