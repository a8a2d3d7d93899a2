"""Shared error types for the realtime voice relay."""

from __future__ import annotations

from dataclasses import dataclass


class RelayError(Exception):
    """Base class for every error raised by the relay."""


class ConfigurationError(RelayError):
    """Raised when the upstream credential is missing. Never retried."""


@dataclass(eq=False)
class TransportError(RelayError):
    """Network or protocol failure on the upstream transport.

    Non-fatal failures feed the reconnection policy; ``fatal`` is only set once
    the policy has given up.
    """

    message: str
    fatal: bool = False

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class UpstreamAPIError(RelayError):
    """Error payload reported by the upstream API. The session stays connected."""

    message: str
    code: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class MalformedMessageError(RelayError, ValueError):
    """A frame from either direction could not be parsed as an event."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(eq=False)
class FunctionExecutionError(RelayError):
    """A tool call raised; converted into a structured error result."""

    name: str
    message: str

    def __str__(self) -> str:
        return self.message


__all__ = [
    "ConfigurationError",
    "FunctionExecutionError",
    "MalformedMessageError",
    "RelayError",
    "TransportError",
    "UpstreamAPIError",
]
