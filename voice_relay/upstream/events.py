"""Upstream realtime event model and client-event builders."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any
from dataclasses import dataclass
from collections.abc import Mapping

import orjson

from voice_relay.errors import MalformedMessageError

# Server -> client
SESSION_CREATED = "session.created"
SESSION_UPDATED = "session.updated"
RESPONSE_AUDIO_DELTA = "response.audio.delta"
RESPONSE_AUDIO_DONE = "response.audio.done"
RESPONSE_AUDIO_TRANSCRIPT_DELTA = "response.audio_transcript.delta"
RESPONSE_TEXT_DELTA = "response.text.delta"
SPEECH_STARTED = "input_audio_buffer.speech_started"
SPEECH_STOPPED = "input_audio_buffer.speech_stopped"
FUNCTION_CALL_ARGUMENTS_DELTA = "response.function_call_arguments.delta"
FUNCTION_CALL_ARGUMENTS_DONE = "response.function_call_arguments.done"
ERROR = "error"

# Client -> server
SESSION_UPDATE = "session.update"
CONVERSATION_ITEM_CREATE = "conversation.item.create"
RESPONSE_CREATE = "response.create"
RESPONSE_CANCEL = "response.cancel"
INPUT_AUDIO_BUFFER_APPEND = "input_audio_buffer.append"
INPUT_AUDIO_BUFFER_COMMIT = "input_audio_buffer.commit"
INPUT_AUDIO_BUFFER_CLEAR = "input_audio_buffer.clear"


@dataclass(frozen=True, slots=True)
class RealtimeEvent:
    """One parsed upstream frame. ``raw`` is the exact text received."""

    type: str
    data: Mapping[str, Any]
    raw: str

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


def parse_upstream_event(raw: str | bytes) -> RealtimeEvent:
    try:
        obj = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise MalformedMessageError(f"invalid JSON: {exc}") from exc

    if not isinstance(obj, dict):
        raise MalformedMessageError("event must be a JSON object")

    event_type = obj.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise MalformedMessageError("event missing non-empty 'type'")

    text = raw if isinstance(raw, str) else raw.decode("utf-8")
    return RealtimeEvent(type=event_type, data=MappingProxyType(obj), raw=text)


def user_text_item(text: str) -> dict[str, Any]:
    return {
        "type": CONVERSATION_ITEM_CREATE,
        "item": {
            "type": "message",
            "role": "user",
            "content": [{"type": "input_text", "text": text}],
        },
    }


def function_call_output(call_id: str | None, output: str) -> dict[str, Any]:
    return {
        "type": CONVERSATION_ITEM_CREATE,
        "item": {
            "type": "function_call_output",
            "call_id": call_id,
            "output": output,
        },
    }


def audio_append(audio_b64: str) -> dict[str, Any]:
    return {"type": INPUT_AUDIO_BUFFER_APPEND, "audio": audio_b64}


def simple_event(event_type: str) -> dict[str, Any]:
    return {"type": event_type}


__all__ = [
    "CONVERSATION_ITEM_CREATE",
    "ERROR",
    "FUNCTION_CALL_ARGUMENTS_DELTA",
    "FUNCTION_CALL_ARGUMENTS_DONE",
    "INPUT_AUDIO_BUFFER_APPEND",
    "INPUT_AUDIO_BUFFER_CLEAR",
    "INPUT_AUDIO_BUFFER_COMMIT",
    "RESPONSE_AUDIO_DELTA",
    "RESPONSE_AUDIO_DONE",
    "RESPONSE_AUDIO_TRANSCRIPT_DELTA",
    "RESPONSE_CANCEL",
    "RESPONSE_CREATE",
    "RESPONSE_TEXT_DELTA",
    "RealtimeEvent",
    "SESSION_CREATED",
    "SESSION_UPDATE",
    "SESSION_UPDATED",
    "SPEECH_STARTED",
    "SPEECH_STOPPED",
    "audio_append",
    "function_call_output",
    "parse_upstream_event",
    "simple_event",
    "user_text_item",
]
