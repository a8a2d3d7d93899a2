"""Upstream session connection states."""

from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    # Reconnect attempts exhausted; only an explicit connect() leaves this state.
    FAILED = "failed"


__all__ = ["SessionState"]
