# ruff: noqa: D100,D101,D102,D103,D105,D107
from __future__ import annotations

import asyncio
import copy
import inspect
import json
from typing import Any

import aiohttp
import pytest

from pteropanel.codecs.panel_models import SocketToken

SOCKET_URL = "wss://node1.example.com:8080/api/servers/8d2f9a61-55b4-4a3e-9c1a-0f1e2d3c4b5a/ws"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers used across the suite."""

    if not config.pluginmanager.hasplugin("pytest_asyncio"):
        config.addinivalue_line(
            "markers", "asyncio: mark test as requiring asyncio event loop support."
        )


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async tests when pytest-asyncio is unavailable."""

    if pyfuncitem.config.pluginmanager.hasplugin("pytest_asyncio"):
        return None

    testfunction = pyfuncitem.obj
    if not inspect.iscoroutinefunction(testfunction):
        return None

    marker = pyfuncitem.get_closest_marker("asyncio")
    if marker is None:
        return None

    with asyncio.Runner(debug=False) as runner:
        runner.run(testfunction(**pyfuncitem.funcargs))
    return True


# ---------------------------------------------------------------------------
# HTTP doubles
# ---------------------------------------------------------------------------


class MockResponse:
    def __init__(
        self,
        status: int,
        body: Any = "",
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status = status
        if isinstance(body, (dict, list)):
            self._text = json.dumps(body)
            default_ctype = "application/json"
        else:
            self._text = body
            default_ctype = "text/plain"
        self.headers = headers or {"Content-Type": default_ctype}
        self.text_calls = 0

    async def __aenter__(self) -> MockResponse:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def text(self) -> str:
        self.text_calls += 1
        return self._text


class FakeSession:
    """Minimal stand-in for the parts of ``aiohttp.ClientSession`` in use."""

    def __init__(self) -> None:
        self._request_queue: list[Any] = []
        self._ws_queue: list[Any] = []
        self.request_calls: list[tuple[str, str, dict[str, Any]]] = []
        self.ws_connect_calls: list[tuple[str, dict[str, Any]]] = []

    def queue_request(self, *responses: Any) -> None:
        self._request_queue.extend(responses)

    def queue_ws(self, *sockets: Any) -> None:
        self._ws_queue.extend(sockets)

    def request(self, method: str, url: str, **kwargs: Any) -> Any:
        self.request_calls.append((method, url, copy.deepcopy(kwargs)))
        if not self._request_queue:
            raise AssertionError("Unexpected request call with no queued response")
        result = self._request_queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def ws_connect(self, url: str, **kwargs: Any) -> Any:
        self.ws_connect_calls.append((url, dict(kwargs)))
        if not self._ws_queue:
            raise AssertionError("Unexpected ws_connect call with no queued socket")
        result = self._ws_queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


# ---------------------------------------------------------------------------
# Websocket doubles
# ---------------------------------------------------------------------------

_CLOSED_MESSAGE = aiohttp.WSMessage(aiohttp.WSMsgType.CLOSED, None, None)


class FakeWebSocket:
    """Queue-driven stand-in for ``aiohttp.ClientWebSocketResponse``."""

    def __init__(self) -> None:
        self._incoming: asyncio.Queue[aiohttp.WSMessage] = asyncio.Queue()
        self.sent: list[str] = []
        self.closed = False
        self.close_calls: list[tuple[int, bytes]] = []
        self._exception: BaseException | None = None

    @property
    def sent_frames(self) -> list[dict[str, Any]]:
        return [json.loads(item) for item in self.sent]

    def feed_text(self, data: str) -> None:
        self._incoming.put_nowait(aiohttp.WSMessage(aiohttp.WSMsgType.TEXT, data, None))

    def feed_frame(self, event: str, *args: Any) -> None:
        self.feed_text(json.dumps({"event": event, "args": list(args)}))

    def feed_binary(self, data: bytes) -> None:
        self._incoming.put_nowait(
            aiohttp.WSMessage(aiohttp.WSMsgType.BINARY, data, None)
        )

    def feed_close(self, code: int = 1000, reason: str = "") -> None:
        self._incoming.put_nowait(
            aiohttp.WSMessage(aiohttp.WSMsgType.CLOSE, code, reason)
        )

    def feed_error(self, exc: BaseException) -> None:
        self._exception = exc
        self._incoming.put_nowait(aiohttp.WSMessage(aiohttp.WSMsgType.ERROR, exc, None))

    def exception(self) -> BaseException | None:
        return self._exception

    async def receive(self) -> aiohttp.WSMessage:
        if self.closed and self._incoming.empty():
            return _CLOSED_MESSAGE
        msg = await self._incoming.get()
        if msg.type in {aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.ERROR}:
            self.closed = True
        return msg

    async def send_str(self, data: str) -> None:
        if self.closed:
            raise ConnectionResetError("Cannot write to closing transport")
        self.sent.append(data)

    async def close(self, *, code: int = 1000, message: bytes = b"") -> bool:
        self.close_calls.append((code, message))
        already = self.closed
        self.closed = True
        self._incoming.put_nowait(_CLOSED_MESSAGE)
        return not already


class FakeTokenProvider:
    """Token provider issuing sequential tokens for one socket URL."""

    def __init__(self, *, socket_url: str = SOCKET_URL) -> None:
        self.socket_url = socket_url
        self.calls = 0
        self.fail_with: Exception | None = None

    async def get_socket_token(self) -> SocketToken:
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return SocketToken(token=f"jwt-token-{self.calls}", socket=self.socket_url)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def token_provider() -> FakeTokenProvider:
    return FakeTokenProvider()
