"""Realtime session configuration defaults sent in ``session.update``."""

from __future__ import annotations

ENV_REALTIME_INSTRUCTIONS = "REALTIME_INSTRUCTIONS"
ENV_REALTIME_VOICE = "REALTIME_VOICE"
ENV_REALTIME_TEMPERATURE = "REALTIME_TEMPERATURE"
ENV_REALTIME_MAX_OUTPUT_TOKENS = "REALTIME_MAX_OUTPUT_TOKENS"

DEFAULT_MODALITIES: tuple[str, ...] = ("text", "audio")
DEFAULT_INSTRUCTIONS = (
    "You are a helpful AI assistant. Respond naturally and conversationally. "
    "Keep responses concise but engaging."
)
# alloy, echo, fable, onyx, nova, shimmer
DEFAULT_VOICE = "alloy"
DEFAULT_AUDIO_FORMAT = "pcm16"
DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"

DEFAULT_TURN_DETECTION_TYPE = "server_vad"
DEFAULT_VAD_THRESHOLD = 0.5
DEFAULT_VAD_PREFIX_PADDING_MS = 300
DEFAULT_VAD_SILENCE_DURATION_MS = 500

DEFAULT_TOOL_CHOICE = "auto"
DEFAULT_TEMPERATURE = 0.8
DEFAULT_MAX_OUTPUT_TOKENS = 2048

__all__ = [
    "DEFAULT_AUDIO_FORMAT",
    "DEFAULT_INSTRUCTIONS",
    "DEFAULT_MAX_OUTPUT_TOKENS",
    "DEFAULT_MODALITIES",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_TOOL_CHOICE",
    "DEFAULT_TRANSCRIPTION_MODEL",
    "DEFAULT_TURN_DETECTION_TYPE",
    "DEFAULT_VAD_PREFIX_PADDING_MS",
    "DEFAULT_VAD_SILENCE_DURATION_MS",
    "DEFAULT_VAD_THRESHOLD",
    "DEFAULT_VOICE",
    "ENV_REALTIME_INSTRUCTIONS",
    "ENV_REALTIME_MAX_OUTPUT_TOKENS",
    "ENV_REALTIME_TEMPERATURE",
    "ENV_REALTIME_VOICE",
]
