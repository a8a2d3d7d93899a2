"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from voice_relay.state import Connection
from voice_relay.runtime.dependencies import RuntimeDeps

from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


async def _teardown(connection: Connection, runtime_deps: RuntimeDeps) -> None:
    # Unsubscribe before closing the session so no event reaches a closed channel.
    connection.closed = True
    connection.unsubscribe_all()
    try:
        await connection.session.disconnect()
    except Exception:
        logger.exception("session disconnect failed id=%s", connection.connection_id)
    runtime_deps.connections.release(connection.connection_id)


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    await ws.accept()
    connection = runtime_deps.connections.register(ws, runtime_deps.session_factory())
    logger.info(
        "Client connected id=%s. Active: %s",
        connection.connection_id,
        runtime_deps.connections.get_connection_count(),
    )
    try:
        await run_message_loop(ws, connection, runtime_deps)
    finally:
        with contextlib.suppress(Exception):
            await _teardown(connection, runtime_deps)
        logger.info(
            "Client disconnected id=%s. Active: %s",
            connection.connection_id,
            runtime_deps.connections.get_connection_count(),
        )


__all__ = ["handle_websocket_connection"]
