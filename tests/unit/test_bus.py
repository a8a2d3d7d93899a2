from __future__ import annotations

import logging

import pytest

from voice_relay.upstream.bus import EventBus


@pytest.mark.asyncio
async def test_publish_reaches_subscribers_in_order() -> None:
    bus: EventBus[int] = EventBus("test")
    seen: list[tuple[str, int]] = []

    async def _async_sub(item: int) -> None:
        seen.append(("async", item))

    bus.subscribe(lambda item: seen.append(("sync", item)))
    bus.subscribe(_async_sub)

    for i in range(3):
        await bus.publish(i)

    assert seen == [("sync", 0), ("async", 0), ("sync", 1), ("async", 1), ("sync", 2), ("async", 2)]


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery_and_is_idempotent() -> None:
    bus: EventBus[str] = EventBus("test")
    seen: list[str] = []
    unsubscribe = bus.subscribe(seen.append)

    await bus.publish("a")
    unsubscribe()
    unsubscribe()
    await bus.publish("b")

    assert seen == ["a"]
    assert len(bus) == 0


@pytest.mark.asyncio
async def test_subscriber_removed_mid_publish_gets_nothing_further() -> None:
    bus: EventBus[str] = EventBus("test")
    seen: list[str] = []
    unsubscribers = {}

    def _first(item: str) -> None:
        seen.append(f"first:{item}")
        unsubscribers["second"]()

    bus.subscribe(_first)
    unsubscribers["second"] = bus.subscribe(lambda item: seen.append(f"second:{item}"))

    await bus.publish("x")

    assert seen == ["first:x"]


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_block_others(caplog: pytest.LogCaptureFixture) -> None:
    bus: EventBus[int] = EventBus("test")
    seen: list[int] = []

    def _broken(_item: int) -> None:
        raise RuntimeError("nope")

    bus.subscribe(_broken)
    bus.subscribe(seen.append)

    with caplog.at_level(logging.ERROR):
        await bus.publish(7)

    assert seen == [7]
    assert "test subscriber failed" in caplog.text
