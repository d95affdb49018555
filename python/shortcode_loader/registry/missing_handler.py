"""Stand-in handler for shortcodes that could not be resolved."""

from __future__ import annotations

from typing import Any

MISSING_HANDLER_MESSAGE = "Could not find a handler for the shortcode [{shortcode}]"


class MissingHandler:
    """Callable returning a diagnostic naming the unresolved shortcode.

    The output embeds the shortcode name verbatim; escaping it for the
    output medium is the rendering layer's job.

    Example:
        >>> MissingHandler("gallery")({"id": 3})
        'Could not find a handler for the shortcode [gallery]'
    """

    __slots__ = ("_shortcode",)

    def __init__(self, shortcode: str) -> None:
        self._shortcode = shortcode

    @property
    def shortcode(self) -> str:
        return self._shortcode

    def __call__(self, *args: Any, **kwargs: Any) -> str:
        return MISSING_HANDLER_MESSAGE.format(shortcode=self._shortcode)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MissingHandler):
            return NotImplemented
        return self._shortcode == other._shortcode

    def __hash__(self) -> int:
        return hash((MissingHandler, self._shortcode))

    def __repr__(self) -> str:
        return f"MissingHandler({self._shortcode!r})"
