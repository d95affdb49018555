"""Handler binder - turns a configuration into shortcode callables.

Binding Contract:
1. Read ``namespace`` (default "") and ``shortcodes`` from the configuration
2. For each (shortcode, specifier) entry, look the handler up:
   a. the bare specifier
   b. ``namespace + separator + specifier``
3. On a found handler, select ``get_html``, else the call operator
4. Anything unresolved binds to a MissingHandler naming the shortcode

bind() never raises and yields one callable per declared shortcode.

Usage:
    binder = HandlerBinder()
    binder.registry.register("Greeter", Greeter)

    bindings = binder.bind({"shortcodes": {"greet": "Greeter"}})
    bindings["greet"]()
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ..event_bridge import EventBridge, EventNames
from ..logging import log_debug, log_warn
from ..types import LogContext
from .method_dispatch import select_handler_method
from .missing_handler import MissingHandler
from .registry_chain import TypeRegistryChain
from .shortcode_definition import ShortcodeDefinition


class HandlerBinder:
    """Binds configured shortcode names to callables.

    Attributes:
        registry: Chain used to find handler classes and functions.
        separator: Namespace separator.
    """

    def __init__(
        self,
        registry: TypeRegistryChain | None = None,
        separator: str = ".",
        event_bridge: EventBridge | None = None,
    ) -> None:
        """Initialize the binder.

        Args:
            registry: Type registry chain. Defaults to TypeRegistryChain.default().
            separator: Separator between namespace and specifier.
            event_bridge: Bridge for notifications. Defaults to the singleton.
        """
        self.registry = registry if registry is not None else TypeRegistryChain.default()
        self.separator = separator
        self._event_bridge = event_bridge

    @property
    def event_bridge(self) -> EventBridge:
        return self._event_bridge or EventBridge.instance()

    def bind(self, config: Mapping[str, Any]) -> dict[str, Callable[..., Any]]:
        """Bind every configured shortcode.

        Args:
            config: A validated configuration.

        Returns:
            Mapping of shortcode name to callable. Empty when the
            configuration has no usable ``shortcodes`` mapping.
        """
        if not isinstance(config, Mapping):
            return {}

        shortcodes = config.get("shortcodes")
        if not isinstance(shortcodes, Mapping):
            if shortcodes is not None:
                log_warn(
                    f"HandlerBinder: 'shortcodes' is a {type(shortcodes).__name__}, expected a mapping"
                )
            return {}

        namespace = self._namespace(config)
        bindings: dict[str, Callable[..., Any]] = {}

        for shortcode, specifier in shortcodes.items():
            definition = ShortcodeDefinition(str(shortcode), specifier, namespace)
            bindings[definition.name] = self.bind_definition(definition)

        return bindings

    def bind_definition(self, definition: ShortcodeDefinition) -> Callable[..., Any]:
        """Bind a single shortcode definition.

        Returns:
            The handler callable, or a MissingHandler.
        """
        try:
            bound = self._resolve(definition)
        except Exception as e:
            log_warn(
                f"HandlerBinder: Resolving '{definition.name}' raised: {e}",
                LogContext(shortcode=definition.name, error_type=type(e).__name__),
            )
            bound = None

        if bound is None:
            log_warn(
                f"HandlerBinder: No handler for shortcode '{definition.name}' "
                f"(specifier {definition.specifier!r})",
                LogContext(shortcode=definition.name),
            )
            self.event_bridge.publish(
                EventNames.HANDLER_MISSING, definition.name, definition.specifier
            )
            return MissingHandler(definition.name)

        log_debug(f"HandlerBinder: Bound '{definition.name}' -> {bound!r}")
        self.event_bridge.publish(EventNames.HANDLER_BOUND, definition.name, bound)
        return bound

    def _resolve(self, definition: ShortcodeDefinition) -> Callable[..., Any] | None:
        # The first name that exists decides; a found type without a usable
        # method does not fall through to the namespaced name
        for candidate in definition.candidate_names(self.separator):
            target = self.registry.resolve(candidate)
            if target is not None:
                return select_handler_method(target)
        return None

    def _namespace(self, config: Mapping[str, Any]) -> str:
        namespace = config.get("namespace")
        if namespace is None:
            return ""
        if not isinstance(namespace, str):
            log_warn(f"HandlerBinder: Ignoring non-string namespace {namespace!r}")
            return ""
        return namespace.rstrip(self.separator)
