"""Invocation method selection for shortcode handlers.

Given a resolved handler type, pick the method the host will call:
1. ``get_html`` if the handler defines it as a callable (data attributes
   and properties of that name do not count)
2. the call operator (``__call__``) otherwise
3. nothing - the binder falls back to a MissingHandler

Handler classes are instantiated with no arguments, unless ``get_html``
is a static or class method, in which case it is used straight off the
class. Plain functions are their own call operator.

Example:
    >>> class Greeter:
    ...     def get_html(self, attrs=None, content=""):
    ...         return "<p>Hello</p>"
    ...
    >>> wrapped = select_handler_method(Greeter)
    >>> wrapped.target_method
    'get_html'
    >>> wrapped()
    '<p>Hello</p>'
"""

from __future__ import annotations

import inspect
from typing import Any

from ..logging import log_debug

PREFERRED_METHOD = "get_html"
INVOKE_METHOD = "__call__"


class MethodDispatchWrapper:
    """Callable that forwards invocations to a selected handler method.

    Attributes:
        handler: The handler the method belongs to (instance, class or function).
        target_method: The selected method name.
    """

    def __init__(self, handler: Any, target_method: str) -> None:
        """Initialize the wrapper.

        Args:
            handler: The handler to wrap.
            target_method: The method name to invoke.

        Raises:
            AttributeError: If handler doesn't have the target method.
        """
        if not hasattr(handler, target_method):
            raise AttributeError(
                f"Handler {_describe(handler)} does not have method '{target_method}'"
            )

        self._handler = handler
        self._target_method = target_method
        self._method = getattr(handler, target_method)

    @property
    def handler(self) -> Any:
        return self._handler

    @property
    def target_method(self) -> str:
        return self._target_method

    @property
    def method(self) -> Any:
        """The bound method that is invoked."""
        return self._method

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._method(*args, **kwargs)

    def unwrap(self) -> Any:
        """Get the original unwrapped handler."""
        return self._handler

    def __repr__(self) -> str:
        return f"MethodDispatchWrapper({_describe(self._handler)}, target_method={self._target_method!r})"


def select_handler_method(target: Any) -> MethodDispatchWrapper | None:
    """Select the invocation method of a resolved handler.

    Args:
        target: A handler class or callable.

    Returns:
        A MethodDispatchWrapper, or None when no usable method exists or
        the class cannot be instantiated.
    """
    if isinstance(target, type):
        return _select_for_class(target)

    if callable(getattr(target, PREFERRED_METHOD, None)):
        return MethodDispatchWrapper(target, PREFERRED_METHOD)

    if callable(target):
        return MethodDispatchWrapper(target, INVOKE_METHOD)

    return None


def _select_for_class(handler_class: type) -> MethodDispatchWrapper | None:
    static_attr = inspect.getattr_static(handler_class, PREFERRED_METHOD, None)
    if isinstance(static_attr, (staticmethod, classmethod)):
        if callable(getattr(handler_class, PREFERRED_METHOD)):
            return MethodDispatchWrapper(handler_class, PREFERRED_METHOD)
        static_attr = None

    # Data attributes and properties named get_html are not methods
    has_preferred = callable(static_attr)
    has_invoke = _defines_call(handler_class)
    if not has_preferred and not has_invoke:
        return None

    try:
        instance = handler_class()
    except Exception as e:
        log_debug(f"Failed to instantiate handler {handler_class.__name__}: {e}")
        return None

    if has_preferred and callable(getattr(instance, PREFERRED_METHOD, None)):
        return MethodDispatchWrapper(instance, PREFERRED_METHOD)
    if has_invoke:
        return MethodDispatchWrapper(instance, INVOKE_METHOD)
    return None


def _defines_call(handler_class: type) -> bool:
    # Every class is callable through its metaclass; only an instance-level
    # __call__ counts as an invocation method
    for klass in handler_class.__mro__:
        if klass is not object and INVOKE_METHOD in vars(klass):
            return callable(vars(klass)[INVOKE_METHOD])
    return False


def _describe(handler: Any) -> str:
    if isinstance(handler, type):
        return handler.__name__
    return getattr(handler, "__name__", handler.__class__.__name__)


__all__ = [
    "INVOKE_METHOD",
    "PREFERRED_METHOD",
    "MethodDispatchWrapper",
    "select_handler_method",
]
