"""HTTP server configuration (env names and defaults)."""

from __future__ import annotations

ENV_HOST = "HOST"
ENV_PORT = "PORT"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3001

SERVICE_NAME = "OpenAI Realtime API Proxy"
SERVICE_VERSION = "1.0.0"

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "ENV_HOST",
    "ENV_PORT",
    "SERVICE_NAME",
    "SERVICE_VERSION",
]
