"""Loader notifications over a pyee EventEmitter.

The resolver and the binder announce what they did (which tier won, which
keys were purged, which shortcodes fell back) on a process-wide bus. Hosts
subscribe to it for metrics or debugging without touching the resolver.

Example:
    >>> from shortcode_loader import EventBridge, EventNames
    >>>
    >>> bus = EventBridge.instance()
    >>> bus.start()
    >>> bus.subscribe(EventNames.HANDLER_MISSING, lambda name, specifier: print(name))
    >>> loader.create_objects()
    gallery
    >>> bus.stop()
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, ClassVar

from pyee.base import EventEmitter

from .logging import log_debug, log_info, log_trace, log_warn


class EventNames:
    """Names of the events published by the loader.

    Attributes:
        CONFIG_RESOLVED: A resolution finished; payload is the ResolutionReport.
        CONFIG_CACHE_PURGED: A total miss deleted the cache keys; payload is the key list.
        CONFIG_FETCH_FAILED: A fetcher raised; payload is (FetcherName, exception).
        HANDLER_BOUND: A shortcode got a real handler; payload is (name, callable).
        HANDLER_MISSING: A shortcode got the fallback; payload is (name, specifier).
    """

    CONFIG_RESOLVED = "config.resolved"
    CONFIG_CACHE_PURGED = "config.cache_purged"
    CONFIG_FETCH_FAILED = "config.fetch_failed"
    HANDLER_BOUND = "handler.bound"
    HANDLER_MISSING = "handler.missing"

    PAYLOADS: ClassVar[dict[str, str]] = {
        CONFIG_RESOLVED: "ResolutionReport",
        CONFIG_CACHE_PURGED: "list[str]",
        CONFIG_FETCH_FAILED: "tuple[FetcherName, Exception]",
        HANDLER_BOUND: "tuple[str, Any]",
        HANDLER_MISSING: "tuple[str, Any]",
    }


class EventBridge:
    """Process-wide notification bus.

    The bridge starts inactive. Until start() is called, publish() drops
    every event, so a loader used without subscribers pays nothing.
    Subscriber exceptions are logged and never reach the publisher.
    """

    _instance: ClassVar[EventBridge | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._emitter = EventEmitter()
        self._active = False

    @classmethod
    def instance(cls) -> EventBridge:
        """Return the shared bridge, creating it on first use."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Stop and discard the shared bridge (used by tests)."""
        with cls._instance_lock:
            current, cls._instance = cls._instance, None
        if current is not None:
            current.stop()

    def start(self) -> None:
        """Begin delivering events. Idempotent."""
        if not self._active:
            self._active = True
            log_info("EventBridge: delivery started")

    def stop(self) -> None:
        """Stop delivering events and drop every subscription. Idempotent."""
        if self._active:
            self._active = False
            self._emitter.remove_all_listeners()
            log_info("EventBridge: delivery stopped")

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """Register a callback for an event.

        Args:
            event: One of the EventNames constants.
            callback: Called with the event payload as positional arguments.
        """
        self._emitter.on(event, callback)
        log_debug(f"EventBridge: {_callback_name(callback)} subscribed to {event}")

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """Remove a callback registered with subscribe()."""
        self._emitter.remove_listener(event, callback)
        log_debug(f"EventBridge: {_callback_name(callback)} unsubscribed from {event}")

    def publish(self, event: str, *payload: Any) -> None:
        """Deliver an event to its subscribers.

        Args:
            event: One of the EventNames constants.
            *payload: Positional arguments handed to each callback.
        """
        if not self._active:
            log_trace(f"EventBridge: inactive, dropped {event}")
            return

        try:
            self._emitter.emit(event, *payload)
        except Exception as e:
            log_warn(
                f"EventBridge subscriber failed for {event}: {e}",
                {"event": event, "error_type": type(e).__name__},
            )

    def listener_count(self, event: str) -> int:
        return len(self._emitter.listeners(event))

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def event_schema(self) -> dict[str, str]:
        """Payload description per event name."""
        return dict(EventNames.PAYLOADS)


def _callback_name(callback: Callable[..., Any]) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


__all__ = ["EventBridge", "EventNames"]
