r"""Shortcode handler binding infrastructure.

This package turns the ``shortcodes`` section of a configuration into
callables. Handler names are looked up through a priority-ordered chain
of type registries until one knows the name.

Built-in Registries:
- ExplicitTypeRegistry (priority 10): Names registered at startup
- ModuleLookupRegistry (priority 100): Dotted path import via importlib

Custom Registries:
Extend TypeRegistry and add it to the chain:

    from shortcode_loader.registry import TypeRegistry, TypeRegistryChain

    chain = TypeRegistryChain.default()
    chain.add_registry(PluginRegistry())

Method Dispatch:
A found handler is invoked through ``get_html`` when it defines one,
otherwise through its call operator. Unresolvable shortcodes bind to a
MissingHandler whose output names the shortcode.
"""

from __future__ import annotations

from .base_registry import TypeRegistry
from .binder import HandlerBinder
from .method_dispatch import MethodDispatchWrapper, select_handler_method
from .missing_handler import MISSING_HANDLER_MESSAGE, MissingHandler
from .registries import ExplicitTypeRegistry, ModuleLookupRegistry
from .registry_chain import TypeRegistryChain
from .shortcode_definition import ShortcodeDefinition

__all__ = [
    # Core types
    "ShortcodeDefinition",
    # Registry base class and chain
    "TypeRegistry",
    "TypeRegistryChain",
    # Built-in registries
    "ExplicitTypeRegistry",
    "ModuleLookupRegistry",
    # Binding
    "HandlerBinder",
    "MethodDispatchWrapper",
    "select_handler_method",
    "MissingHandler",
    "MISSING_HANDLER_MESSAGE",
]
