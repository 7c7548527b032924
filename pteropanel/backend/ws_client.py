"""Shared websocket helpers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
import inspect
import logging
from typing import Any, Protocol

from ..codecs.panel_models import SocketToken

_LOGGER = logging.getLogger(__name__)

EventHandler = Callable[..., Awaitable[None] | None]


class SocketTokenProvider(Protocol):
    """Protocol for the REST call that issues websocket credentials."""

    async def get_socket_token(self) -> SocketToken:
        """Return a fresh one-time token and its socket endpoint."""


class SocketState(str, Enum):
    """Lifecycle of a socket session."""

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class WSStats:
    """Track websocket frame and event stats."""

    frames_total: int = 0
    events_total: int = 0
    last_event_ts: float = 0.0
    last_event: str | None = None


class EventDispatcher:
    """Register callbacks per notification name and deliver payloads to them.

    Handlers may be plain callables or coroutine functions; coroutines are
    awaited in registration order. A failing handler is logged and does not
    prevent delivery to the remaining handlers.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._logger = logger or _LOGGER

    def subscribe(self, event: str, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler`` for ``event`` and return an unsubscribe callable."""

        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers.setdefault(event, []).append(handler)

        def _unsubscribe() -> None:
            self.unsubscribe(event, handler)

        return _unsubscribe

    def unsubscribe(self, event: str, handler: EventHandler) -> bool:
        """Remove one registration of ``handler``; return False if absent."""

        handlers = self._handlers.get(event)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._handlers[event]
        return True

    async def emit(self, event: str, *payload: Any) -> int:
        """Deliver ``payload`` to every handler of ``event``; return the count."""

        delivered = 0
        # copy: handlers may unsubscribe while being called
        for handler in list(self._handlers.get(event, ())):
            try:
                result = handler(*payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                self._logger.exception("WS: handler for %r failed", event)
            delivered += 1
        return delivered
