from __future__ import annotations

import pytest

from voice_relay.handlers.connections import ConnectionRegistry
from tests.helpers import FakeSession, FakeBrowserSocket


def test_register_assigns_unique_ids() -> None:
    registry = ConnectionRegistry()
    a = registry.register(FakeBrowserSocket(), FakeSession())
    b = registry.register(FakeBrowserSocket(), FakeSession())

    assert a.connection_id != b.connection_id
    assert a.connection_id in registry
    assert b.connection_id in registry
    assert registry.get_connection_count() == 2


def test_release_is_idempotent() -> None:
    registry = ConnectionRegistry()
    conn = registry.register(FakeBrowserSocket(), FakeSession())

    assert registry.release(conn.connection_id) is conn
    assert registry.release(conn.connection_id) is None
    assert conn.connection_id not in registry
    assert len(registry) == 0


def test_unsubscribe_all_runs_each_unsubscriber_once() -> None:
    registry = ConnectionRegistry()
    session = FakeSession()
    conn = registry.register(FakeBrowserSocket(), session)
    conn.subscriptions.append(session.subscribe(lambda _e: None))
    conn.subscriptions.append(session.subscribe_errors(lambda _e: None))
    assert conn.subscribed

    conn.unsubscribe_all()
    conn.unsubscribe_all()

    assert not conn.subscribed
    assert len(session.events) == 0
    assert len(session.errors) == 0


@pytest.mark.asyncio
async def test_close_all_disconnects_every_session() -> None:
    registry = ConnectionRegistry()
    sessions = [FakeSession(), FakeSession()]
    conns = [registry.register(FakeBrowserSocket(), session) for session in sessions]

    await registry.close_all()

    assert len(registry) == 0
    assert all(conn.closed for conn in conns)
    assert [session.disconnect_calls for session in sessions] == [1, 1]
