"""Minimal synchronous event emitter used by dimensions and the coordinator."""

from __future__ import annotations

from typing import Any, Callable

Handler = Callable[..., None]


class EventEmitter:
    """Named-event subscription with synchronous delivery.

    Handlers run in registration order on the caller's thread. Exceptions
    raised by a handler propagate to whoever called ``emit``.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def on(self, event: str, handler: Handler) -> Handler:
        self._handlers.setdefault(event, []).append(handler)
        return handler

    def off(self, event: str, handler: Handler) -> None:
        """Remove one registration of handler; no-op if not registered."""
        handlers = self._handlers.get(event)
        if not handlers:
            return
        for i, registered in enumerate(handlers):
            if registered == handler or getattr(registered, "listener", None) == handler:
                del handlers[i]
                break
        else:
            return
        if not handlers:
            del self._handlers[event]

    def once(self, event: str, handler: Handler) -> Handler:
        """Register handler for the next emit only. ``off(event, handler)`` cancels it."""

        def _wrapper(*args: Any) -> None:
            self.off(event, _wrapper)
            handler(*args)

        _wrapper.listener = handler  # type: ignore[attr-defined]
        return self.on(event, _wrapper)

    def emit(self, event: str, *args: Any) -> bool:
        """Call every handler for event. Returns True if any were registered."""
        handlers = self._handlers.get(event)
        if not handlers:
            return False
        for handler in list(handlers):
            handler(*args)
        return True

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))
