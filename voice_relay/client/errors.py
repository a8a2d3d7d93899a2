"""Human-readable rendering of error payloads received from the relay."""

from __future__ import annotations

from typing import Any

import orjson

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"
AUTH_ERROR_HINT = "OpenAI API key is invalid or missing. Please check your .env file."

_AUTH_MARKERS = ("authentication", "API key", "unauthorized")


def describe_error(error: Any) -> str:
    if isinstance(error, str):
        return error
    if isinstance(error, dict):
        nested = error.get("error")
        for candidate in (
            error.get("message"),
            nested.get("message") if isinstance(nested, dict) else None,
            error.get("details"),
        ):
            if candidate:
                return candidate if isinstance(candidate, str) else str(candidate)
        return orjson.dumps(error).decode("utf-8")
    return UNKNOWN_ERROR_MESSAGE


def is_auth_error(message: str) -> bool:
    return any(marker in message for marker in _AUTH_MARKERS)


__all__ = ["AUTH_ERROR_HINT", "UNKNOWN_ERROR_MESSAGE", "describe_error", "is_auth_error"]
