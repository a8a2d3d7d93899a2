"""Environment parsing for runtime settings."""

from __future__ import annotations

import os

from voice_relay.config.secrets import get_openai_api_key
from voice_relay.config.server import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT
from voice_relay.config.upstream import (
    ENV_OPENAI_REALTIME_URL,
    ENV_OPENAI_REALTIME_MODEL,
    DEFAULT_OPENAI_REALTIME_URL,
    DEFAULT_OPENAI_REALTIME_MODEL,
)
from voice_relay.config.reconnect import (
    ENV_RECONNECT_MAX_ATTEMPTS,
    ENV_RECONNECT_BASE_DELAY_MS,
    DEFAULT_RECONNECT_MAX_ATTEMPTS,
    DEFAULT_RECONNECT_BASE_DELAY_MS,
)
from voice_relay.state.settings import (
    AppSettings,
    ServerSettings,
    SessionSettings,
    UpstreamSettings,
    ReconnectSettings,
    TurnDetectionSettings,
)
from voice_relay.config.session import (
    DEFAULT_VOICE,
    ENV_REALTIME_VOICE,
    DEFAULT_MODALITIES,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOOL_CHOICE,
    DEFAULT_AUDIO_FORMAT,
    DEFAULT_INSTRUCTIONS,
    DEFAULT_VAD_THRESHOLD,
    ENV_REALTIME_TEMPERATURE,
    DEFAULT_MAX_OUTPUT_TOKENS,
    ENV_REALTIME_INSTRUCTIONS,
    DEFAULT_TRANSCRIPTION_MODEL,
    DEFAULT_TURN_DETECTION_TYPE,
    DEFAULT_VAD_PREFIX_PADDING_MS,
    ENV_REALTIME_MAX_OUTPUT_TOKENS,
    DEFAULT_VAD_SILENCE_DURATION_MS,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _load_upstream_settings() -> UpstreamSettings:
    return UpstreamSettings(
        api_key=get_openai_api_key(),
        model=_str_env(ENV_OPENAI_REALTIME_MODEL, DEFAULT_OPENAI_REALTIME_MODEL),
        base_url=_str_env(ENV_OPENAI_REALTIME_URL, DEFAULT_OPENAI_REALTIME_URL).rstrip("?"),
    )


def _load_session_settings() -> SessionSettings:
    max_tokens = _int_env(ENV_REALTIME_MAX_OUTPUT_TOKENS, DEFAULT_MAX_OUTPUT_TOKENS)
    if max_tokens <= 0:
        max_tokens = DEFAULT_MAX_OUTPUT_TOKENS

    return SessionSettings(
        modalities=DEFAULT_MODALITIES,
        instructions=_str_env(ENV_REALTIME_INSTRUCTIONS, DEFAULT_INSTRUCTIONS),
        voice=_str_env(ENV_REALTIME_VOICE, DEFAULT_VOICE),
        input_audio_format=DEFAULT_AUDIO_FORMAT,
        output_audio_format=DEFAULT_AUDIO_FORMAT,
        transcription_model=DEFAULT_TRANSCRIPTION_MODEL,
        turn_detection=TurnDetectionSettings(
            type=DEFAULT_TURN_DETECTION_TYPE,
            threshold=DEFAULT_VAD_THRESHOLD,
            prefix_padding_ms=DEFAULT_VAD_PREFIX_PADDING_MS,
            silence_duration_ms=DEFAULT_VAD_SILENCE_DURATION_MS,
        ),
        tool_choice=DEFAULT_TOOL_CHOICE,
        temperature=_float_env(ENV_REALTIME_TEMPERATURE, DEFAULT_TEMPERATURE),
        max_response_output_tokens=max_tokens,
    )


def _load_reconnect_settings() -> ReconnectSettings:
    return ReconnectSettings(
        max_attempts=max(0, _int_env(ENV_RECONNECT_MAX_ATTEMPTS, DEFAULT_RECONNECT_MAX_ATTEMPTS)),
        base_delay_ms=max(0.0, _float_env(ENV_RECONNECT_BASE_DELAY_MS, DEFAULT_RECONNECT_BASE_DELAY_MS)),
    )


def _load_server_settings() -> ServerSettings:
    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_int_env(ENV_PORT, DEFAULT_PORT),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        upstream=_load_upstream_settings(),
        session=_load_session_settings(),
        reconnect=_load_reconnect_settings(),
        server=_load_server_settings(),
    )


__all__ = ["load_settings"]
