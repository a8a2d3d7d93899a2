"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    api_key: str
    model: str
    base_url: str

    @property
    def url(self) -> str:
        return f"{self.base_url}?model={self.model}"


@dataclass(frozen=True, slots=True)
class TurnDetectionSettings:
    type: str
    threshold: float
    prefix_padding_ms: int
    silence_duration_ms: int


@dataclass(frozen=True, slots=True)
class SessionSettings:
    modalities: tuple[str, ...]
    instructions: str
    voice: str
    input_audio_format: str
    output_audio_format: str
    transcription_model: str
    turn_detection: TurnDetectionSettings
    tool_choice: str
    temperature: float
    max_response_output_tokens: int


@dataclass(frozen=True, slots=True)
class ReconnectSettings:
    max_attempts: int
    base_delay_ms: float


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    upstream: UpstreamSettings
    session: SessionSettings
    reconnect: ReconnectSettings
    server: ServerSettings


__all__ = [
    "AppSettings",
    "ReconnectSettings",
    "ServerSettings",
    "SessionSettings",
    "TurnDetectionSettings",
    "UpstreamSettings",
]
