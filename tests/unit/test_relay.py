from __future__ import annotations

import asyncio
from functools import partial

import pytest

from voice_relay.state import RuntimeDeps
from voice_relay.upstream import UpstreamSession
from voice_relay.upstream.events import parse_upstream_event
from voice_relay.handlers.connections import ConnectionRegistry
from voice_relay.config.reconnect import MAX_ATTEMPTS_REACHED_MESSAGE
from voice_relay.errors import TransportError, UpstreamAPIError, ConfigurationError
from voice_relay.handlers.websocket.manager import handle_websocket_connection
from voice_relay.config.websocket import WS_CONNECTED_MESSAGE, WS_NOT_CONNECTED_MESSAGE
from tests.helpers import (
    FakeSession,
    FakeConnector,
    RecordingSleep,
    FakeBrowserSocket,
    FakeUpstreamSocket,
    wait_until,
    make_settings,
)

CONNECTED_FRAME = {"type": "connected", "message": WS_CONNECTED_MESSAGE}


def _deps(*sessions: FakeSession) -> RuntimeDeps:
    pending = list(sessions)
    return RuntimeDeps(
        connections=ConnectionRegistry(),
        session_factory=lambda: pending.pop(0),
        settings=make_settings(),
    )


async def _run_to_end(ws: FakeBrowserSocket, deps: RuntimeDeps) -> None:
    ws.hang_up()
    await asyncio.wait_for(handle_websocket_connection(ws, deps), timeout=1.0)


@pytest.mark.asyncio
async def test_malformed_frame_gets_one_error_and_connection_survives() -> None:
    session = FakeSession()
    deps = _deps(session)
    ws = FakeBrowserSocket("not json", '{"type": "text_message", "text": "hi"}')

    await _run_to_end(ws, deps)

    frames = ws.sent_frames()
    assert len(frames) == 1
    assert frames[0]["type"] == "error"
    assert frames[0]["error"].startswith("invalid JSON")
    assert session.texts == ["hi"]
    assert ws.accepted


@pytest.mark.asyncio
async def test_binary_frames_are_parsed_like_text() -> None:
    session = FakeSession()
    ws = FakeBrowserSocket(b"\x00\x01", b'{"type": "text_message", "text": "hi"}')

    await _run_to_end(ws, _deps(session))

    frames = ws.sent_frames()
    assert len(frames) == 1
    assert frames[0]["type"] == "error"
    assert session.texts == ["hi"]


@pytest.mark.asyncio
async def test_unknown_message_type_is_ignored() -> None:
    session = FakeSession()
    ws = FakeBrowserSocket('{"type": "ping"}')

    await _run_to_end(ws, _deps(session))

    assert ws.sent == []


@pytest.mark.asyncio
async def test_connect_forwards_raw_events_in_order_until_teardown() -> None:
    session = FakeSession()
    deps = _deps(session)
    ws = FakeBrowserSocket('{"type": "connect"}')
    task = asyncio.create_task(handle_websocket_connection(ws, deps))
    await wait_until(lambda: len(ws.sent) == 1)

    raws = [
        '{"type":"session.created","session":{"id":"s1"}}',
        '{"type":"response.audio.delta","delta":"AAAA"}',
        '{"type":"response.audio.done"}',
    ]
    for raw in raws:
        await session.events.publish(parse_upstream_event(raw))

    assert ws.sent_frames()[0] == CONNECTED_FRAME
    assert ws.sent[1:] == raws
    assert len(deps.connections) == 1

    ws.hang_up()
    await asyncio.wait_for(task, timeout=1.0)

    await session.events.publish(parse_upstream_event('{"type":"response.done"}'))
    assert len(ws.sent) == 4
    assert len(session.events) == 0
    assert len(session.errors) == 0
    assert session.disconnect_calls == 1
    assert len(deps.connections) == 0


@pytest.mark.asyncio
async def test_repeated_connect_does_not_duplicate_forwarding() -> None:
    session = FakeSession()
    ws = FakeBrowserSocket('{"type": "connect"}', '{"type": "connect"}')
    task = asyncio.create_task(handle_websocket_connection(ws, _deps(session)))
    await wait_until(lambda: len(ws.sent) == 2)

    await session.events.publish(parse_upstream_event('{"type":"response.text.delta","delta":"x"}'))

    assert session.connect_calls == 2
    assert len(session.events) == 1
    assert ws.sent_frames() == [CONNECTED_FRAME, CONNECTED_FRAME, {"type": "response.text.delta", "delta": "x"}]

    ws.hang_up()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_session_errors_become_error_frames() -> None:
    session = FakeSession()
    ws = FakeBrowserSocket('{"type": "connect"}')
    task = asyncio.create_task(handle_websocket_connection(ws, _deps(session)))
    await wait_until(lambda: len(ws.sent) == 1)

    await session.errors.publish(UpstreamAPIError("Invalid value", code="invalid_value"))
    await session.errors.publish(TransportError(MAX_ATTEMPTS_REACHED_MESSAGE, fatal=True))

    assert ws.sent_frames()[1:] == [
        {"type": "error", "error": "Invalid value"},
        {"type": "error", "error": MAX_ATTEMPTS_REACHED_MESSAGE},
    ]

    ws.hang_up()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [
        ConfigurationError("OpenAI API key not found. Please set OPENAI_API_KEY in your environment"),
        TransportError("upstream connect failed: refused"),
    ],
)
async def test_connect_failure_is_reported_without_connected_frame(exc: Exception) -> None:
    session = FakeSession(connect_error=exc)
    ws = FakeBrowserSocket('{"type": "connect"}')

    await _run_to_end(ws, _deps(session))

    assert ws.sent_frames() == [{"type": "error", "error": str(exc)}]


@pytest.mark.asyncio
async def test_connected_frame_only_once_session_is_connected() -> None:
    session = FakeSession(connected=False)
    ws = FakeBrowserSocket('{"type": "connect"}')

    await _run_to_end(ws, _deps(session))

    assert session.connect_calls == 1
    assert ws.sent_frames() == [{"type": "error", "error": WS_NOT_CONNECTED_MESSAGE}]


@pytest.mark.asyncio
async def test_commands_while_upstream_is_down() -> None:
    session = FakeSession(connected=False)
    ws = FakeBrowserSocket(
        '{"type": "audio_data", "audio": "AAAA"}',
        '{"type": "text_message", "text": "hello"}',
        '{"type": "commit_audio"}',
    )

    await _run_to_end(ws, _deps(session))

    assert session.audio == ["AAAA"]
    assert session.texts == ["hello"]
    assert session.commits == 1
    assert ws.sent_frames() == [
        {"type": "error", "error": WS_NOT_CONNECTED_MESSAGE},
        {"type": "error", "error": WS_NOT_CONNECTED_MESSAGE},
    ]


@pytest.mark.asyncio
async def test_commands_with_missing_fields_are_rejected() -> None:
    session = FakeSession()
    ws = FakeBrowserSocket('{"type": "audio_data"}', '{"type": "text_message", "text": 7}')

    await _run_to_end(ws, _deps(session))

    assert [frame["type"] for frame in ws.sent_frames()] == ["error", "error"]
    assert session.audio == []
    assert session.texts == []


@pytest.mark.asyncio
async def test_any_string_text_is_forwarded_verbatim() -> None:
    session = FakeSession()
    ws = FakeBrowserSocket('{"type": "text_message", "text": "  "}', '{"type": "text_message", "text": ""}')

    await _run_to_end(ws, _deps(session))

    assert ws.sent == []
    assert session.texts == ["  ", ""]


@pytest.mark.asyncio
async def test_disconnect_command_then_close_is_safe() -> None:
    session = FakeSession()
    deps = _deps(session)
    ws = FakeBrowserSocket('{"type": "connect"}', '{"type": "disconnect"}', '{"type": "disconnect"}')

    await _run_to_end(ws, deps)

    # two explicit disconnects plus teardown
    assert session.disconnect_calls == 3
    assert len(session.events) == 0
    assert len(deps.connections) == 0


@pytest.mark.asyncio
async def test_connections_are_isolated() -> None:
    first, second = FakeSession(), FakeSession()
    deps = _deps(first, second)
    ws_a = FakeBrowserSocket('{"type": "connect"}')
    ws_b = FakeBrowserSocket('{"type": "connect"}')
    task_a = asyncio.create_task(handle_websocket_connection(ws_a, deps))
    await wait_until(lambda: len(ws_a.sent) == 1)
    task_b = asyncio.create_task(handle_websocket_connection(ws_b, deps))
    await wait_until(lambda: len(ws_b.sent) == 1)
    assert len(deps.connections) == 2

    await first.events.publish(parse_upstream_event('{"type":"response.audio.delta","delta":"A"}'))
    await second.events.publish(parse_upstream_event('{"type":"response.audio.delta","delta":"B"}'))

    assert ws_a.sent_frames()[1:] == [{"type": "response.audio.delta", "delta": "A"}]
    assert ws_b.sent_frames()[1:] == [{"type": "response.audio.delta", "delta": "B"}]

    ws_a.hang_up()
    await asyncio.wait_for(task_a, timeout=1.0)
    assert len(deps.connections) == 1
    assert second.disconnect_calls == 0

    ws_b.hang_up()
    await asyncio.wait_for(task_b, timeout=1.0)
    assert len(deps.connections) == 0


@pytest.mark.asyncio
async def test_disconnect_releases_record_and_connect_readmits_it() -> None:
    session = FakeSession()
    deps = _deps(session)
    ws = FakeBrowserSocket('{"type": "connect"}', '{"type": "disconnect"}')
    task = asyncio.create_task(handle_websocket_connection(ws, deps))
    await wait_until(lambda: session.disconnect_calls == 1)
    assert len(deps.connections) == 0
    assert len(session.events) == 0

    ws.push({"type": "connect"})
    await wait_until(lambda: len(ws.sent) == 2)
    assert len(deps.connections) == 1
    assert len(session.events) == 1

    ws.hang_up()
    await asyncio.wait_for(task, timeout=1.0)
    assert len(deps.connections) == 0


@pytest.mark.asyncio
async def test_upstream_frames_reach_only_their_browser_verbatim() -> None:
    sock_a, sock_b = FakeUpstreamSocket(), FakeUpstreamSocket()
    settings = make_settings()
    deps = RuntimeDeps(
        connections=ConnectionRegistry(),
        session_factory=partial(
            UpstreamSession,
            upstream=settings.upstream,
            session=settings.session,
            reconnect=settings.reconnect,
            connector=FakeConnector(sock_a, sock_b),
            sleep=RecordingSleep(),
        ),
        settings=settings,
    )
    ws_a = FakeBrowserSocket('{"type": "connect"}')
    ws_b = FakeBrowserSocket('{"type": "connect"}')
    task_a = asyncio.create_task(handle_websocket_connection(ws_a, deps))
    await wait_until(lambda: len(ws_a.sent) == 1)
    task_b = asyncio.create_task(handle_websocket_connection(ws_b, deps))
    await wait_until(lambda: len(ws_b.sent) == 1)

    raws = [
        '{"type": "session.created", "session": {"id": "sess_a"}}',
        '{"type":"response.audio.delta","delta":"AAAA"}',
        '{"type":"response.audio_transcript.delta",  "delta":"Hi"}',
        '{"type":"response.done"}',
    ]
    for raw in raws:
        sock_a.feed(raw)
    await wait_until(lambda: len(ws_a.sent) == 1 + len(raws))

    assert ws_a.sent_frames()[0] == CONNECTED_FRAME
    assert ws_a.sent[1:] == raws
    assert ws_b.sent_frames() == [CONNECTED_FRAME]
    assert sock_a.sent_types() == ["session.update"]
    assert sock_b.sent_types() == ["session.update"]

    ws_a.push({"type": "text_message", "text": "hello"})
    await wait_until(lambda: len(sock_a.sent) == 3)
    assert sock_a.sent_types()[1:] == ["conversation.item.create", "response.create"]
    assert sock_b.sent_types() == ["session.update"]

    ws_a.hang_up()
    await asyncio.wait_for(task_a, timeout=1.0)
    assert sock_a.closed
    assert not sock_b.closed
    assert len(deps.connections) == 1

    ws_b.hang_up()
    await asyncio.wait_for(task_b, timeout=1.0)
    assert sock_b.closed
    assert len(deps.connections) == 0
