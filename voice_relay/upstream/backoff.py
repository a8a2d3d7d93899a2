"""Exponential reconnect backoff (no jitter)."""

from __future__ import annotations


def backoff_delay_s(attempt: int, base_delay_ms: float) -> float:
    """Delay before reconnect ``attempt`` (1-based): ``2**attempt * base`` ms."""
    return (2 ** max(0, int(attempt))) * float(base_delay_ms) / 1000.0


__all__ = ["backoff_delay_s"]
