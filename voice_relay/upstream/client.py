"""Client for one OpenAI Realtime session over a persistent WebSocket."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Mapping, Callable, Awaitable

import orjson
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from voice_relay.config.reconnect import MAX_ATTEMPTS_REACHED_MESSAGE
from voice_relay.state.settings import SessionSettings, UpstreamSettings, ReconnectSettings
from voice_relay.config.upstream import BETA_HEADER, BETA_HEADER_VALUE, AUTHORIZATION_HEADER
from voice_relay.errors import (
    RelayError,
    TransportError,
    UpstreamAPIError,
    ConfigurationError,
    MalformedMessageError,
    FunctionExecutionError,
)

from . import events as ev
from .bus import EventBus
from .state import SessionState
from .tools import ToolRegistry
from .backoff import backoff_delay_s
from .session_config import build_session_update

logger = logging.getLogger(__name__)

Connector = Callable[..., Awaitable[Any]]
SleepFn = Callable[[float], Awaitable[None]]
EventHandler = Callable[[ev.RealtimeEvent], Awaitable[None]]


class UpstreamSession:
    """Owns one upstream transport, its event stream and its reconnection policy.

    Every inbound event is first published to ``events`` subscribers (in
    subscription order) and then passed to the internal side-effect handler
    for its type, if any. Errors meant for the client side are published on
    ``errors``.
    """

    def __init__(
        self,
        *,
        upstream: UpstreamSettings,
        session: SessionSettings,
        reconnect: ReconnectSettings,
        tools: ToolRegistry | None = None,
        connector: Connector | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        self._upstream = upstream
        self._session_settings = session
        self._reconnect = reconnect
        self._tools = tools or ToolRegistry()
        self._connector = connector or websockets.connect
        self._sleep = sleep or asyncio.sleep

        self._ws: Any = None
        self._state = SessionState.IDLE
        self._reconnect_attempts = 0
        # Set by disconnect(); suppresses the reconnection path.
        self._closing = False
        self._recv_task: asyncio.Task | None = None
        # Resolved when the open attempt in flight settles, either way.
        self._opening: asyncio.Future | None = None
        self._reconnect_task: asyncio.Task | None = None

        self.events: EventBus[ev.RealtimeEvent] = EventBus("events")
        self.errors: EventBus[RelayError] = EventBus("errors")

        self._handlers: dict[str, EventHandler] = {
            ev.SESSION_CREATED: self._on_session_created,
            ev.SESSION_UPDATED: self._on_session_updated,
            ev.RESPONSE_AUDIO_DELTA: self._on_audio_delta,
            ev.RESPONSE_AUDIO_TRANSCRIPT_DELTA: self._on_transcript_delta,
            ev.SPEECH_STARTED: self._on_speech_started,
            ev.SPEECH_STOPPED: self._on_speech_stopped,
            ev.FUNCTION_CALL_ARGUMENTS_DELTA: self._on_function_call_delta,
            ev.FUNCTION_CALL_ARGUMENTS_DONE: self._on_function_call_done,
            ev.ERROR: self._on_error,
        }

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is SessionState.CONNECTED and self._ws is not None

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    def status(self) -> dict[str, Any]:
        return {
            "connected": self.is_connected,
            "state": self._state.value,
            "reconnect_attempts": self._reconnect_attempts,
        }

    def subscribe(self, subscriber: Callable[[ev.RealtimeEvent], Any]) -> Callable[[], None]:
        return self.events.subscribe(subscriber)

    def subscribe_errors(self, subscriber: Callable[[RelayError], Any]) -> Callable[[], None]:
        return self.errors.subscribe(subscriber)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the transport and send the session configuration.

        Raises:
            ConfigurationError: no API key is configured; nothing is attempted.
            TransportError: the transport could not be opened. The reconnection
                policy keeps trying in the background. Also raised when an
                attempt already in flight (a reconnect) fails.
        """
        if not self._upstream.api_key:
            raise ConfigurationError("OpenAI API key not found. Please set OPENAI_API_KEY in your environment")
        if self._state is SessionState.CONNECTED:
            return
        if self._state is SessionState.CONNECTING:
            await self._wait_for_pending_open()
            return

        self._closing = False
        await self._cancel_reconnect()
        if self._state is SessionState.FAILED:
            self._reconnect_attempts = 0

        try:
            await self._open()
        except TransportError:
            self._schedule_reconnect()
            raise

    async def disconnect(self) -> None:
        """Close the transport. Never triggers reconnection; safe to call twice."""
        self._closing = True
        await self._cancel_reconnect()

        task, self._recv_task = self._recv_task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task

        ws, self._ws = self._ws, None
        if self._state is not SessionState.FAILED:
            self._state = SessionState.DISCONNECTED
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close()
            logger.info("Disconnected from OpenAI Realtime API")

    async def _wait_for_pending_open(self) -> None:
        opening = self._opening
        if opening is not None:
            await asyncio.shield(opening)
        if not self.is_connected:
            raise TransportError("upstream connection attempt in progress failed")

    async def _open(self) -> None:
        self._state = SessionState.CONNECTING
        opening = self._opening = asyncio.get_running_loop().create_future()
        try:
            await self._establish()
        finally:
            if self._opening is opening:
                self._opening = None
            if not opening.done():
                opening.set_result(None)

    async def _establish(self) -> None:
        headers = {
            AUTHORIZATION_HEADER: f"Bearer {self._upstream.api_key}",
            BETA_HEADER: BETA_HEADER_VALUE,
        }
        try:
            ws = await self._connector(self._upstream.url, additional_headers=headers, max_size=None)
        except (OSError, TimeoutError, WebSocketException) as exc:
            self._state = SessionState.DISCONNECTED
            raise TransportError(f"upstream connect failed: {exc}") from exc

        if self._closing:
            self._state = SessionState.DISCONNECTED
            with contextlib.suppress(Exception):
                await ws.close()
            return

        # Session configuration goes out before the session is visible as connected.
        if not await self._transmit(ws, build_session_update(self._session_settings, self._tools)):
            self._state = SessionState.DISCONNECTED
            with contextlib.suppress(Exception):
                await ws.close()
            raise TransportError("upstream closed before session configuration was sent")

        self._ws = ws
        self._state = SessionState.CONNECTED
        self._reconnect_attempts = 0
        logger.info("Connected to OpenAI Realtime API")
        self._recv_task = asyncio.create_task(self._receive_loop(ws))

    async def _receive_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                await self._dispatch(raw)
        except ConnectionClosed as exc:
            logger.warning("OpenAI Realtime connection closed: %s", exc)
        else:
            logger.info("OpenAI Realtime connection closed: code=%s", getattr(ws, "close_code", None))

        if self._ws is ws:
            self._ws = None
        if self._closing:
            return
        self._state = SessionState.DISCONNECTED
        self._schedule_reconnect()

    # ------------------------------------------------------------------
    # Reconnection
    # ------------------------------------------------------------------

    def _schedule_reconnect(self) -> None:
        if self._closing:
            return
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return
        self._reconnect_task = asyncio.create_task(self._reconnect_loop())

    async def _cancel_reconnect(self) -> None:
        task, self._reconnect_task = self._reconnect_task, None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _reconnect_loop(self) -> None:
        while not self._closing:
            if self._reconnect_attempts >= self._reconnect.max_attempts:
                self._state = SessionState.FAILED
                logger.error("Max reconnection attempts reached")
                await self.errors.publish(TransportError(MAX_ATTEMPTS_REACHED_MESSAGE, fatal=True))
                return

            self._reconnect_attempts += 1
            delay_s = backoff_delay_s(self._reconnect_attempts, self._reconnect.base_delay_ms)
            logger.info(
                "Attempting to reconnect (%d/%d) in %.0fms",
                self._reconnect_attempts,
                self._reconnect.max_attempts,
                delay_s * 1000.0,
            )
            await self._sleep(delay_s)
            if self._closing:
                return

            try:
                await self._open()
            except TransportError as exc:
                logger.warning("Reconnection failed: %s", exc)
                continue
            return

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def send(self, event: Mapping[str, Any]) -> bool:
        """Send ``event`` if connected. Returns False instead of raising."""
        ws = self._ws
        if ws is None or self._state is not SessionState.CONNECTED:
            logger.debug("dropping %s: upstream not connected", event.get("type"))
            return False
        return await self._transmit(ws, event)

    @staticmethod
    async def _transmit(ws: Any, event: Mapping[str, Any]) -> bool:
        try:
            await ws.send(orjson.dumps(event).decode("utf-8"))
        except ConnectionClosed:
            return False
        except Exception:
            logger.debug("upstream send failed", exc_info=True)
            return False
        return True

    async def send_text_message(self, text: str) -> bool:
        if not await self.send(ev.user_text_item(text)):
            return False
        return await self.send(ev.simple_event(ev.RESPONSE_CREATE))

    async def send_audio_data(self, audio_b64: str) -> bool:
        return await self.send(ev.audio_append(audio_b64))

    async def commit_audio(self) -> bool:
        committed = await self.send(ev.simple_event(ev.INPUT_AUDIO_BUFFER_COMMIT))
        requested = await self.send(ev.simple_event(ev.RESPONSE_CREATE))
        if committed != requested:
            logger.warning("partial commit: audio_commit=%s response_create=%s", committed, requested)
        return committed and requested

    async def clear_audio_buffer(self) -> bool:
        return await self.send(ev.simple_event(ev.INPUT_AUDIO_BUFFER_CLEAR))

    async def cancel_response(self) -> bool:
        return await self.send(ev.simple_event(ev.RESPONSE_CANCEL))

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def _dispatch(self, raw: str | bytes) -> None:
        try:
            event = ev.parse_upstream_event(raw)
        except MalformedMessageError as exc:
            logger.error("Error parsing upstream message: %s", exc)
            return

        await self.events.publish(event)

        handler = self._handlers.get(event.type)
        if handler is not None:
            await handler(event)

    async def _on_session_created(self, event: ev.RealtimeEvent) -> None:
        session = event.get("session")
        session_id = session.get("id") if isinstance(session, Mapping) else None
        logger.info("Session created: %s", session_id)

    async def _on_session_updated(self, _event: ev.RealtimeEvent) -> None:
        logger.info("Session updated")

    async def _on_audio_delta(self, event: ev.RealtimeEvent) -> None:
        delta = event.get("delta")
        logger.debug("audio delta: %d base64 chars", len(delta) if isinstance(delta, str) else 0)

    async def _on_transcript_delta(self, event: ev.RealtimeEvent) -> None:
        logger.info("AI transcript: %s", event.get("delta"))

    async def _on_speech_started(self, _event: ev.RealtimeEvent) -> None:
        logger.info("User started speaking")

    async def _on_speech_stopped(self, _event: ev.RealtimeEvent) -> None:
        logger.info("User stopped speaking")

    async def _on_function_call_delta(self, event: ev.RealtimeEvent) -> None:
        logger.debug("Function call: %s %s", event.get("name"), event.get("delta"))

    async def _on_function_call_done(self, event: ev.RealtimeEvent) -> None:
        call_id = event.get("call_id")
        name = event.get("name")
        try:
            output = self._tools.execute(str(name or ""), event.get("arguments"))
        except FunctionExecutionError as exc:
            logger.error("Function execution error: %s: %s", exc.name, exc.message)
            output = orjson.dumps({"error": exc.message}).decode("utf-8")

        if not await self.send(ev.function_call_output(call_id, output)):
            logger.warning("function_call_output for %s (%s) was not delivered", name, call_id)

    async def _on_error(self, event: ev.RealtimeEvent) -> None:
        error = event.get("error")
        message: str | None = None
        code: str | None = None
        if isinstance(error, Mapping):
            if isinstance(error.get("message"), str) and error.get("message"):
                message = error["message"]
            if isinstance(error.get("code"), str):
                code = error["code"]
        logger.error("API Error: %s", error)
        await self.errors.publish(UpstreamAPIError(message or "Unknown API error", code=code))


__all__ = ["UpstreamSession"]
