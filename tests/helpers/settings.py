from __future__ import annotations

from voice_relay.state.settings import (
    AppSettings,
    ServerSettings,
    SessionSettings,
    UpstreamSettings,
    ReconnectSettings,
    TurnDetectionSettings,
)


def make_settings(*, api_key: str = "sk-test", max_attempts: int = 5, base_delay_ms: float = 1000.0) -> AppSettings:
    return AppSettings(
        upstream=UpstreamSettings(
            api_key=api_key,
            model="gpt-4o-realtime-preview-2024-10-01",
            base_url="wss://realtime.invalid/v1/realtime",
        ),
        session=SessionSettings(
            modalities=("text", "audio"),
            instructions="Be brief.",
            voice="alloy",
            input_audio_format="pcm16",
            output_audio_format="pcm16",
            transcription_model="whisper-1",
            turn_detection=TurnDetectionSettings(
                type="server_vad",
                threshold=0.5,
                prefix_padding_ms=300,
                silence_duration_ms=500,
            ),
            tool_choice="auto",
            temperature=0.8,
            max_response_output_tokens=2048,
        ),
        reconnect=ReconnectSettings(max_attempts=max_attempts, base_delay_ms=base_delay_ms),
        server=ServerSettings(host="127.0.0.1", port=3001),
    )


__all__ = ["make_settings"]
