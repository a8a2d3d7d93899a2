"""WebSocket message loop for the browser channel."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

from voice_relay.state import Connection
from voice_relay.config.websocket import WS_KEY_TYPE, WS_DISCONNECT_EVENT
from voice_relay.errors import MalformedMessageError
from voice_relay.runtime.dependencies import RuntimeDeps

from .errors import send_error
from .dispatch import HANDLERS
from .parser import parse_client_message

logger = logging.getLogger(__name__)


async def _parse_or_send_error(ws: WebSocket, raw: str | bytes | None) -> dict[str, Any] | None:
    try:
        if raw is None:
            raise MalformedMessageError("empty frame")
        return parse_client_message(raw)
    except MalformedMessageError as exc:
        logger.warning("Error handling client message: %s", exc)
        await send_error(ws, str(exc))
        return None


async def run_message_loop(ws: WebSocket, connection: Connection, runtime_deps: RuntimeDeps) -> None:
    """Process browser frames until the socket closes.

    Text and binary frames are both parsed as JSON.
    """
    while True:
        message = await ws.receive()
        if message["type"] == WS_DISCONNECT_EVENT:
            return

        raw = message.get("text")
        if raw is None:
            raw = message.get("bytes")

        msg = await _parse_or_send_error(ws, raw)
        if msg is None:
            continue

        msg_type = msg[WS_KEY_TYPE]
        handler = HANDLERS.get(msg_type)
        if handler is None:
            logger.info("Unknown message type: %s", msg_type)
            continue

        await handler(ws, runtime_deps, connection, msg)


__all__ = ["run_message_loop"]
