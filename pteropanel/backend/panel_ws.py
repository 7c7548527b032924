"""Websocket console session for a single panel server."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from contextlib import suppress
import logging
import time
from typing import Any

import aiohttp

from ..api import PanelError
from ..codecs.panel_codec import decode_frame, decode_stats, encode_frame
from ..codecs.panel_models import SocketFrame, SocketToken
from ..config import DEFAULT_CONFIG, PanelConfig
from ..const import (
    CLOSE_REASON_CALLER,
    EVENT_CLOSE,
    EVENT_ERROR,
    EVENT_STATS,
    EVENT_TOKEN_EXPIRING,
    FRAME_AUTH,
    FRAME_SEND_COMMAND,
    FRAME_SEND_LOGS,
    FRAME_SEND_STATS,
    FRAME_SET_STATE,
    FRAME_STATS,
    FRAME_TOKEN_EXPIRING,
    ensure_power_action,
    normalize_event_name,
)
from .sanitize import redact_token_fragment, sanitise_headers, sanitise_url
from .ws_client import (
    EventDispatcher,
    EventHandler,
    SocketState,
    SocketTokenProvider,
    WSStats,
)

_LOGGER = logging.getLogger(__name__)


class TokenUnavailableError(PanelError):
    """The websocket token could not be obtained from the panel."""


class NotConnectedError(PanelError):
    """A frame was sent while no websocket connection is open."""


class PanelSocket:
    """Console websocket of one server.

    The session owns at most one live connection. ``connect`` fetches a fresh
    token from ``provider`` (normally a :class:`~pteropanel.server.PanelServer`),
    opens the socket and authenticates. Inbound frames are consumed by a
    background reader task and delivered to handlers registered with
    :meth:`subscribe`. Unexpected closes are reported through the ``close``
    notification; reconnecting is left to the caller.

    ``connect`` and ``close`` must not be called concurrently on the same
    session.
    """

    def __init__(
        self,
        provider: SocketTokenProvider,
        *,
        session: aiohttp.ClientSession | None = None,
        config: PanelConfig | None = None,
    ) -> None:
        """Initialise an idle session bound to ``provider``."""
        self._provider = provider
        self._session = session or getattr(provider, "session", None)
        if self._session is None:
            raise ValueError("an aiohttp session is required")
        self._config = config or getattr(provider, "config", None) or DEFAULT_CONFIG
        self._endpoint: str | None = None
        self._token: str | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._reader: asyncio.Task | None = None
        self._state = SocketState.IDLE
        self._dispatcher = EventDispatcher(logger=_LOGGER)
        self._stats = WSStats()

    async def __aenter__(self) -> PanelSocket:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def endpoint(self) -> str | None:
        """Return the socket URL of the current or last connection."""

        return self._endpoint

    @property
    def state(self) -> SocketState:
        """Return the lifecycle state of the session."""

        return self._state

    @property
    def is_connected(self) -> bool:
        """Return True while a connection handle is held."""

        return self._ws is not None

    @property
    def stats(self) -> WSStats:
        """Return frame and event counters."""

        return self._stats

    # ------------------------------------------------------------------
    # Observer registration
    # ------------------------------------------------------------------
    def subscribe(self, event: str, handler: EventHandler) -> Callable[[], None]:
        """Call ``handler`` for every ``event`` notification.

        Returns a callable removing the registration again.
        """

        return self._dispatcher.subscribe(event, handler)

    def unsubscribe(self, event: str, handler: EventHandler) -> bool:
        """Remove ``handler`` from ``event``."""

        return self._dispatcher.unsubscribe(event, handler)

    async def _emit(self, event: str, *payload: Any) -> None:
        self._stats.events_total += 1
        self._stats.last_event_ts = time.time()
        self._stats.last_event = event
        await self._dispatcher.emit(event, *payload)

    # ------------------------------------------------------------------
    # Connection control
    # ------------------------------------------------------------------
    async def _fetch_token(self) -> SocketToken:
        """Ask the provider for a token, wrapping any failure."""

        try:
            return await self._provider.get_socket_token()
        except asyncio.CancelledError:
            raise
        except Exception as err:
            _LOGGER.warning(
                "WS: token request failed (%s: %s)", type(err).__name__, err
            )
            raise TokenUnavailableError("websocket token unavailable") from err

    async def connect(self) -> None:
        """Open a new connection and authenticate it.

        Any existing connection is closed first. Returns once the socket is
        open and the ``auth`` frame has been sent. If the transport fails to
        open or drops before ``auth`` is written, the session is left CLOSED
        and an :class:`aiohttp.ClientError` is raised.
        """
        token = await self._fetch_token()

        if self._ws is not None:
            await self.close()

        self._endpoint = token.socket
        self._token = token.token
        self._state = SocketState.CONNECTING
        _LOGGER.info("WS: connecting to %s", sanitise_url(self._endpoint))

        headers = {"User-Agent": self._config.user_agent}
        _LOGGER.debug(
            "WS: upgrade headers %s (origin %s)",
            sanitise_headers(headers),
            self._config.web_origin,
        )
        try:
            async with asyncio.timeout(self._config.timeout):
                ws = await self._session.ws_connect(
                    self._endpoint,
                    origin=self._config.web_origin,
                    headers=headers,
                    heartbeat=None,
                )
        except (aiohttp.ClientError, TimeoutError) as err:
            self._state = SocketState.CLOSED
            _LOGGER.warning(
                "WS: connection to %s failed (%s: %s)",
                sanitise_url(self._endpoint),
                type(err).__name__,
                err,
            )
            raise

        self._ws = ws
        try:
            await self.send_auth()
        except (PanelError, aiohttp.ClientError, ConnectionError) as err:
            self._ws = None
            self._state = SocketState.CLOSED
            with suppress(aiohttp.ClientError, ConnectionError):
                await ws.close()
            _LOGGER.warning(
                "WS: authentication on %s failed (%s)",
                sanitise_url(self._endpoint),
                type(err).__name__,
            )
            raise aiohttp.ClientConnectionError(
                "websocket closed before authentication"
            ) from err
        self._state = SocketState.OPEN
        self._reader = asyncio.get_running_loop().create_task(
            self._read_loop(ws), name="pteropanel-ws-reader"
        )
        _LOGGER.debug("WS: authenticated, reader started")

    async def regen_token(self) -> None:
        """Replace the stored token without reopening the connection."""

        token = await self._fetch_token()
        self._token = token.token
        _LOGGER.debug("WS: token refreshed (%s)", redact_token_fragment(self._token))

    async def close(self) -> None:
        """Close the connection held by the caller, if any."""

        ws = self._ws
        if ws is None:
            return
        self._ws = None
        self._state = SocketState.CLOSED
        reader = self._reader
        self._reader = None
        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            with suppress(asyncio.CancelledError):
                await reader
        with suppress(aiohttp.ClientError, ConnectionError):
            await ws.close(code=aiohttp.WSCloseCode.OK, message=CLOSE_REASON_CALLER.encode())
        _LOGGER.info("WS: %s", CLOSE_REASON_CALLER)
        await self._emit(EVENT_CLOSE, CLOSE_REASON_CALLER)

    # ------------------------------------------------------------------
    # Outbound frames
    # ------------------------------------------------------------------
    async def send(self, frame: SocketFrame | Mapping[str, Any]) -> None:
        """Serialise ``frame`` and write it to the open connection."""

        ws = self._ws
        if ws is None or ws.closed:
            raise NotConnectedError("websocket not connected")
        if not isinstance(frame, SocketFrame):
            frame = SocketFrame.model_validate(frame)
        await ws.send_str(encode_frame(frame))

    async def send_auth(self) -> None:
        """Authenticate the connection with the stored token."""

        await self.send(SocketFrame(event=FRAME_AUTH, args=[self._token]))

    async def send_command(self, command: str) -> None:
        """Run ``command`` on the server console."""

        await self.send(SocketFrame(event=FRAME_SEND_COMMAND, args=[command]))

    async def send_power_action(self, action: str) -> None:
        """Send a power signal (start, stop, restart or kill)."""

        signal = ensure_power_action(action)
        await self.send(SocketFrame(event=FRAME_SET_STATE, args=[signal]))

    async def request_logs(self) -> None:
        """Ask the daemon to replay recent console output."""

        await self.send(SocketFrame(event=FRAME_SEND_LOGS, args=[]))

    async def request_stats(self) -> None:
        """Ask the daemon for an immediate resource stats frame."""

        await self.send(SocketFrame(event=FRAME_SEND_STATS, args=[]))

    # ------------------------------------------------------------------
    # Inbound frames
    # ------------------------------------------------------------------
    async def _read_loop(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        """Consume frames until the transport closes."""

        reason = "connection closed"
        try:
            while True:
                msg = await ws.receive()
                if msg.type == aiohttp.WSMsgType.TEXT:
                    self._stats.frames_total += 1
                    await self._handle_frame(msg.data)
                elif msg.type == aiohttp.WSMsgType.BINARY:
                    try:
                        data = msg.data.decode("utf-8")
                    except UnicodeDecodeError:
                        _LOGGER.debug("WS: dropping undecodable binary frame")
                        continue
                    self._stats.frames_total += 1
                    await self._handle_frame(data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    error = ws.exception() or msg.data
                    reason = f"connection error: {error}"
                    await self._emit(EVENT_ERROR, error)
                elif msg.type in {
                    aiohttp.WSMsgType.CLOSE,
                    aiohttp.WSMsgType.CLOSING,
                    aiohttp.WSMsgType.CLOSED,
                }:
                    if msg.type == aiohttp.WSMsgType.CLOSE:
                        reason = msg.extra or f"closed by peer (code {msg.data})"
                    break
        except asyncio.CancelledError:
            raise
        except (aiohttp.ClientError, ConnectionError) as err:
            reason = f"connection error: {err}"
            await self._emit(EVENT_ERROR, err)

        if self._ws is not ws:
            # closed or replaced by the caller
            return
        self._ws = None
        self._reader = None
        self._state = SocketState.CLOSED
        _LOGGER.info("WS: connection lost (%s)", reason)
        await self._emit(EVENT_CLOSE, reason)

    async def _handle_frame(self, data: str) -> None:
        """Translate one text frame into a notification."""

        frame = decode_frame(data)
        if frame is None:
            _LOGGER.debug("WS: dropping invalid frame (%d bytes)", len(data))
            return

        if frame.event == FRAME_STATS:
            stats = decode_stats(frame.args[0] if frame.args else None)
            if stats is not None:
                await self._emit(EVENT_STATS, stats)
            return

        if frame.event == FRAME_TOKEN_EXPIRING:
            try:
                await self.regen_token()
                await self.send_auth()
            except (PanelError, aiohttp.ClientError, ConnectionError) as err:
                _LOGGER.warning("WS: token refresh failed (%s)", type(err).__name__)
                await self._emit(EVENT_ERROR, err)
                return
            await self._emit(EVENT_TOKEN_EXPIRING)
            return

        name = normalize_event_name(frame.event)
        if frame.args:
            await self._emit(name, frame.args[0])
        else:
            await self._emit(name)
