"""Dispatch handlers for browser commands."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocket

from voice_relay.state import Connection
from voice_relay.upstream import RealtimeEvent
from voice_relay.runtime.dependencies import RuntimeDeps
from voice_relay.errors import RelayError, TransportError, ConfigurationError
from voice_relay.config.websocket import (
    WS_CMD_CONNECT,
    WS_MSG_CONNECTED,
    WS_CMD_AUDIO_DATA,
    WS_CMD_DISCONNECT,
    WS_CMD_COMMIT_AUDIO,
    WS_CMD_TEXT_MESSAGE,
    WS_CONNECTED_MESSAGE,
    WS_NOT_CONNECTED_MESSAGE,
)

from .errors import send_error, safe_send_json, safe_send_text

logger = logging.getLogger(__name__)

HandlerFn = Callable[[WebSocket, RuntimeDeps, Connection, dict[str, Any]], Awaitable[None]]


def _subscribe_forwarders(ws: WebSocket, connection: Connection) -> None:
    async def _forward_event(event: RealtimeEvent) -> None:
        if connection.closed:
            return
        await safe_send_text(ws, event.raw)

    async def _forward_error(exc: RelayError) -> None:
        if connection.closed:
            return
        await send_error(ws, str(exc))

    connection.subscriptions.append(connection.session.subscribe(_forward_event))
    connection.subscriptions.append(connection.session.subscribe_errors(_forward_error))


async def _handle_connect(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    connection: Connection,
    _msg: dict[str, Any],
) -> None:
    if connection.connection_id not in runtime_deps.connections:
        runtime_deps.connections.readmit(connection)
    if not connection.subscribed:
        _subscribe_forwarders(ws, connection)

    try:
        await connection.session.connect()
    except (ConfigurationError, TransportError) as exc:
        logger.warning("upstream connect failed id=%s: %s", connection.connection_id, exc)
        await send_error(ws, str(exc))
        return

    if not connection.session.is_connected:
        await send_error(ws, WS_NOT_CONNECTED_MESSAGE)
        return
    await safe_send_json(ws, {"type": WS_MSG_CONNECTED, "message": WS_CONNECTED_MESSAGE})


async def _handle_audio_data(
    ws: WebSocket,
    _runtime_deps: RuntimeDeps,
    connection: Connection,
    msg: dict[str, Any],
) -> None:
    audio = msg.get("audio")
    if not isinstance(audio, str) or not audio:
        await send_error(ws, "audio_data requires a base64 'audio' field")
        return
    if not await connection.session.send_audio_data(audio):
        logger.debug("audio chunk dropped id=%s: upstream not connected", connection.connection_id)


async def _handle_text_message(
    ws: WebSocket,
    _runtime_deps: RuntimeDeps,
    connection: Connection,
    msg: dict[str, Any],
) -> None:
    text = msg.get("text")
    if not isinstance(text, str):
        await send_error(ws, "text_message requires a string 'text' field")
        return
    if not await connection.session.send_text_message(text):
        await send_error(ws, WS_NOT_CONNECTED_MESSAGE)


async def _handle_commit_audio(
    ws: WebSocket,
    _runtime_deps: RuntimeDeps,
    connection: Connection,
    _msg: dict[str, Any],
) -> None:
    if not await connection.session.commit_audio():
        await send_error(ws, WS_NOT_CONNECTED_MESSAGE)


async def _handle_disconnect(
    _ws: WebSocket,
    runtime_deps: RuntimeDeps,
    connection: Connection,
    _msg: dict[str, Any],
) -> None:
    connection.unsubscribe_all()
    await connection.session.disconnect()
    runtime_deps.connections.release(connection.connection_id)


HANDLERS: dict[str, HandlerFn] = {
    WS_CMD_CONNECT: _handle_connect,
    WS_CMD_AUDIO_DATA: _handle_audio_data,
    WS_CMD_TEXT_MESSAGE: _handle_text_message,
    WS_CMD_COMMIT_AUDIO: _handle_commit_audio,
    WS_CMD_DISCONNECT: _handle_disconnect,
}

__all__ = ["HANDLERS"]
