"""Configuration module exports (env names and defaults only)."""

from .audio import TARGET_SAMPLE_RATE_HZ
from .server import DEFAULT_PORT, SERVICE_NAME, SERVICE_VERSION

__all__ = [
    "DEFAULT_PORT",
    "SERVICE_NAME",
    "SERVICE_VERSION",
    "TARGET_SAMPLE_RATE_HZ",
]
