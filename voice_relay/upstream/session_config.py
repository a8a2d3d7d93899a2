"""Builds the ``session.update`` event sent right after the transport opens."""

from __future__ import annotations

from typing import Any

from voice_relay.state.settings import SessionSettings

from .events import SESSION_UPDATE
from .tools import ToolRegistry


def build_session_update(settings: SessionSettings, tools: ToolRegistry) -> dict[str, Any]:
    vad = settings.turn_detection
    return {
        "type": SESSION_UPDATE,
        "session": {
            "modalities": list(settings.modalities),
            "instructions": settings.instructions,
            "voice": settings.voice,
            "input_audio_format": settings.input_audio_format,
            "output_audio_format": settings.output_audio_format,
            "input_audio_transcription": {"model": settings.transcription_model},
            "turn_detection": {
                "type": vad.type,
                "threshold": vad.threshold,
                "prefix_padding_ms": vad.prefix_padding_ms,
                "silence_duration_ms": vad.silence_duration_ms,
            },
            "tools": tools.declarations(),
            "tool_choice": settings.tool_choice,
            "temperature": settings.temperature,
            "max_response_output_tokens": settings.max_response_output_tokens,
        },
    }


__all__ = ["build_session_update"]
