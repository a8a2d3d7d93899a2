"""Headless voice chat controller speaking the relay's browser protocol."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from pathlib import Path
from collections.abc import Callable, Awaitable

import orjson
import numpy as np
import websockets
from websockets.exceptions import ConnectionClosed

from voice_relay.audio import encode_audio
from voice_relay.upstream import events as ev
from voice_relay.audio.container import read_audio_file
from voice_relay.config.websocket import (
    WS_CMD_CONNECT,
    WS_MSG_CONNECTED,
    WS_CMD_AUDIO_DATA,
    WS_CMD_DISCONNECT,
    WS_CMD_COMMIT_AUDIO,
    WS_CMD_TEXT_MESSAGE,
    WS_MSG_ERROR,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)

from .playback import PlaybackQueue
from .errors import AUTH_ERROR_HINT, is_auth_error, describe_error
from .transcript import (
    KIND_TEXT,
    ROLE_USER,
    KIND_AUDIO,
    KIND_ERROR,
    ROLE_SYSTEM,
    KIND_TRANSCRIPT,
    Transcript,
)

logger = logging.getLogger(__name__)

Connector = Callable[..., Awaitable[Any]]

STATUS_DISCONNECTED = "Disconnected"
STATUS_CONNECTING = "Connecting..."
STATUS_CONNECTED_SERVER = "Connected to Server"
STATUS_CONNECTED_OPENAI = "Connected to OpenAI"
STATUS_CONNECTION_ERROR = "Connection Error"

# Upstream error events passed through verbatim by the relay.
_API_ERROR_TYPES = frozenset({"session.error", "response.error"})
# Either marks the end of an assistant turn.
_RESPONSE_END_TYPES = frozenset({ev.RESPONSE_AUDIO_DONE, "response.done"})


class VoiceChatClient:
    """Connects to the relay, sends user turns and tracks the conversation.

    ``handle_message`` applies one decoded server frame to the client state;
    the receive loop feeds it every frame in arrival order.
    """

    def __init__(self, server_url: str, *, connector: Connector | None = None) -> None:
        self.server_url = server_url
        self._connector = connector or websockets.connect

        self.status = STATUS_DISCONNECTED
        self.is_connected = False
        self.error: str | None = None
        self.transcript = Transcript()
        self.playback = PlaybackQueue()

        self._ws: Any = None
        self._recv_task: asyncio.Task | None = None
        self._connected = asyncio.Event()
        self._response_done = asyncio.Event()

    async def connect(self) -> None:
        self.status = STATUS_CONNECTING
        self.error = None
        try:
            self._ws = await self._connector(self.server_url, max_size=None)
        except (OSError, websockets.exceptions.WebSocketException) as exc:
            self.status = STATUS_CONNECTION_ERROR
            self.error = "Connection error. Please check if the server is running."
            raise ConnectionError(self.error) from exc

        self.status = STATUS_CONNECTED_SERVER
        self._recv_task = asyncio.create_task(self._recv_loop(self._ws))
        await self._send({"type": WS_CMD_CONNECT})

    async def wait_connected(self, timeout_s: float) -> bool:
        try:
            await asyncio.wait_for(self._connected.wait(), timeout=timeout_s)
        except TimeoutError:
            return False
        return True

    async def wait_response_done(self, timeout_s: float) -> bool:
        try:
            await asyncio.wait_for(self._response_done.wait(), timeout=timeout_s)
        except TimeoutError:
            return False
        return True

    async def send_text(self, text: str) -> None:
        self._response_done.clear()
        self.transcript.add(ROLE_USER, text, KIND_TEXT)
        await self._send({"type": WS_CMD_TEXT_MESSAGE, "text": text})

    async def send_audio(self, samples: np.ndarray, sample_rate: int) -> None:
        audio_b64 = encode_audio(samples, sample_rate)
        self._response_done.clear()
        await self._send({"type": WS_CMD_AUDIO_DATA, "audio": audio_b64})
        await self._send({"type": WS_CMD_COMMIT_AUDIO})
        self.transcript.add(ROLE_USER, "Audio message sent", KIND_AUDIO)

    async def send_audio_file(self, path: str | Path) -> None:
        samples, sample_rate = await read_audio_file(path)
        await self.send_audio(samples, sample_rate)

    async def disconnect(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.send(orjson.dumps({"type": WS_CMD_DISCONNECT}).decode("utf-8"))
            with contextlib.suppress(Exception):
                await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)

        task, self._recv_task = self._recv_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task

        self.is_connected = False
        self._connected.clear()
        self.status = STATUS_DISCONNECTED

    async def _send(self, msg: dict[str, Any]) -> None:
        if self._ws is None:
            raise ConnectionError("not connected to the relay")
        await self._ws.send(orjson.dumps(msg).decode("utf-8"))

    async def _recv_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                try:
                    data = orjson.loads(raw)
                except orjson.JSONDecodeError:
                    logger.error("Error parsing server message: %r", raw[:200])
                    self.error = "Failed to parse server response"
                    continue
                if isinstance(data, dict):
                    self.handle_message(data)
        except ConnectionClosed as exc:
            logger.info("relay connection closed: %s", exc)
        finally:
            self.is_connected = False
            self.status = STATUS_DISCONNECTED
            # Unblock any waiter; the connection is gone.
            self._response_done.set()

    def handle_message(self, data: dict[str, Any]) -> None:
        msg_type = data.get("type")

        if msg_type == WS_MSG_CONNECTED:
            self.is_connected = True
            self.status = STATUS_CONNECTED_OPENAI
            self._connected.set()
            self.transcript.add(ROLE_SYSTEM, "Connected! You can start talking.")
        elif msg_type == ev.RESPONSE_AUDIO_DELTA:
            delta = data.get("delta")
            if isinstance(delta, str) and delta:
                self.playback.enqueue(delta)
        elif msg_type in _RESPONSE_END_TYPES:
            self.playback.mark_done()
            self._response_done.set()
        elif msg_type == ev.RESPONSE_TEXT_DELTA:
            self.transcript.append_delta(KIND_TEXT, str(data.get("delta") or ""))
        elif msg_type == ev.RESPONSE_AUDIO_TRANSCRIPT_DELTA:
            self.transcript.append_delta(KIND_TRANSCRIPT, str(data.get("delta") or ""))
        elif msg_type == ev.SPEECH_STARTED:
            self.transcript.add(ROLE_SYSTEM, "Listening...")
        elif msg_type == ev.SPEECH_STOPPED:
            self.transcript.add(ROLE_SYSTEM, "Processing...")
        elif msg_type == WS_MSG_ERROR:
            message = describe_error(data.get("error"))
            logger.error("Server error: %s", message)
            self.error = AUTH_ERROR_HINT if is_auth_error(message) else message
            self.transcript.add(ROLE_SYSTEM, f"Error: {message}", KIND_ERROR)
            self._response_done.set()
        elif msg_type in _API_ERROR_TYPES:
            message = describe_error(data.get("error"))
            logger.error("OpenAI API error: %s", message)
            self.error = f"OpenAI API Error: {message}"
            self.transcript.add(ROLE_SYSTEM, f"API Error: {message}", KIND_ERROR)
            self._response_done.set()
        else:
            logger.debug("Unhandled message type: %s", msg_type)


__all__ = ["VoiceChatClient"]
