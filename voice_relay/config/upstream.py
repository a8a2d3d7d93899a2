"""Upstream realtime API configuration (env names and defaults)."""

from __future__ import annotations

ENV_OPENAI_REALTIME_MODEL = "OPENAI_REALTIME_MODEL"
ENV_OPENAI_REALTIME_URL = "OPENAI_REALTIME_URL"

DEFAULT_OPENAI_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-10-01"
DEFAULT_OPENAI_REALTIME_URL = "wss://api.openai.com/v1/realtime"

AUTHORIZATION_HEADER = "Authorization"
BETA_HEADER = "OpenAI-Beta"
BETA_HEADER_VALUE = "realtime=v1"

__all__ = [
    "AUTHORIZATION_HEADER",
    "BETA_HEADER",
    "BETA_HEADER_VALUE",
    "DEFAULT_OPENAI_REALTIME_MODEL",
    "DEFAULT_OPENAI_REALTIME_URL",
    "ENV_OPENAI_REALTIME_MODEL",
    "ENV_OPENAI_REALTIME_URL",
]
