from __future__ import annotations

import logging

import pytest

from pteropanel.backend.ws_client import EventDispatcher, SocketState, WSStats


@pytest.mark.asyncio
async def test_emit_calls_sync_and_async_handlers_in_order() -> None:
    dispatcher = EventDispatcher()
    calls: list[tuple[str, tuple]] = []

    def _sync(*payload) -> None:
        calls.append(("sync", payload))

    async def _async(*payload) -> None:
        calls.append(("async", payload))

    dispatcher.subscribe("status", _sync)
    dispatcher.subscribe("status", _async)

    delivered = await dispatcher.emit("status", "running")

    assert delivered == 2
    assert calls == [("sync", ("running",)), ("async", ("running",))]


@pytest.mark.asyncio
async def test_emit_without_subscribers_returns_zero() -> None:
    assert await EventDispatcher().emit("nobody") == 0


def test_subscribe_rejects_non_callable() -> None:
    with pytest.raises(TypeError):
        EventDispatcher().subscribe("status", "not callable")  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_unsubscribe_callable_and_method() -> None:
    dispatcher = EventDispatcher()
    seen: list[str] = []

    def _first(value: str) -> None:
        seen.append(f"first:{value}")

    def _second(value: str) -> None:
        seen.append(f"second:{value}")

    remove_first = dispatcher.subscribe("console_output", _first)
    dispatcher.subscribe("console_output", _second)

    remove_first()
    assert dispatcher.unsubscribe("console_output", _second) is True
    assert dispatcher.unsubscribe("console_output", _second) is False
    assert dispatcher._handlers == {}

    await dispatcher.emit("console_output", "x")
    assert seen == []


@pytest.mark.asyncio
async def test_handler_failure_is_logged_and_delivery_continues(
    caplog: pytest.LogCaptureFixture,
) -> None:
    logger = logging.getLogger("pteropanel.test.dispatcher")
    caplog.set_level(logging.ERROR, logger=logger.name)
    dispatcher = EventDispatcher(logger=logger)
    seen: list[str] = []

    async def _broken(_value: str) -> None:
        raise ValueError("bad handler")

    dispatcher.subscribe("error", _broken)
    dispatcher.subscribe("error", seen.append)

    delivered = await dispatcher.emit("error", "boom")

    assert delivered == 2
    assert seen == ["boom"]
    assert "bad handler" in caplog.text


@pytest.mark.asyncio
async def test_handler_may_unsubscribe_itself_during_emit() -> None:
    dispatcher = EventDispatcher()
    seen: list[str] = []

    def _once(value: str) -> None:
        seen.append(value)
        remove()

    remove = dispatcher.subscribe("status", _once)

    await dispatcher.emit("status", "a")
    await dispatcher.emit("status", "b")

    assert seen == ["a"]


def test_state_and_stats_defaults() -> None:
    stats = WSStats()

    assert stats.frames_total == 0
    assert stats.events_total == 0
    assert stats.last_event is None
    assert SocketState.OPEN == "open"
