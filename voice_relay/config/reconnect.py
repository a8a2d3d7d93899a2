"""Upstream reconnection policy configuration."""

from __future__ import annotations

ENV_RECONNECT_MAX_ATTEMPTS = "RECONNECT_MAX_ATTEMPTS"
ENV_RECONNECT_BASE_DELAY_MS = "RECONNECT_BASE_DELAY_MS"

DEFAULT_RECONNECT_MAX_ATTEMPTS = 5
DEFAULT_RECONNECT_BASE_DELAY_MS = 1000.0

MAX_ATTEMPTS_REACHED_MESSAGE = "Connection lost and max reconnection attempts reached"

__all__ = [
    "DEFAULT_RECONNECT_BASE_DELAY_MS",
    "DEFAULT_RECONNECT_MAX_ATTEMPTS",
    "ENV_RECONNECT_BASE_DELAY_MS",
    "ENV_RECONNECT_MAX_ATTEMPTS",
    "MAX_ATTEMPTS_REACHED_MESSAGE",
]
