"""Send helpers for frames going back to the browser."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from voice_relay.config.websocket import WS_KEY_TYPE, WS_MSG_ERROR, WS_GENERIC_ERROR_MESSAGE

logger = logging.getLogger(__name__)


def build_error_frame(message: str | None) -> dict[str, Any]:
    return {WS_KEY_TYPE: WS_MSG_ERROR, "error": message or WS_GENERIC_ERROR_MESSAGE}


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_json(ws: WebSocket, data: dict[str, Any]) -> bool:
    return await safe_send_text(ws, orjson.dumps(data).decode("utf-8"))


async def send_error(ws: WebSocket, message: str | None) -> bool:
    return await safe_send_json(ws, build_error_frame(message))


__all__ = ["build_error_frame", "safe_send_json", "safe_send_text", "send_error"]
