"""Websocket backend package exports."""
from __future__ import annotations

from typing import Any

from .ws_client import EventDispatcher, SocketState, SocketTokenProvider, WSStats

__all__ = [
    "EventDispatcher",
    "NotConnectedError",
    "PanelSocket",
    "SocketState",
    "SocketTokenProvider",
    "TokenUnavailableError",
    "WSStats",
]


def __getattr__(name: str) -> Any:
    """Lazily import the socket session to avoid circular imports."""

    if name in {"NotConnectedError", "PanelSocket", "TokenUnavailableError"}:
        from . import panel_ws

        value = getattr(panel_ws, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
