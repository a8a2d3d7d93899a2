"""Audio wire format constants."""

from __future__ import annotations

# The wire carries PCM16 mono at a single fixed rate in both directions.
TARGET_SAMPLE_RATE_HZ: int = 24000
PCM16_SAMPLE_WIDTH_BYTES: int = 2

# Quantization uses 32767 so that 1.0 never overflows; decoding divides by 32768.
PCM16_ENCODE_SCALE: float = 32767.0
PCM16_DECODE_SCALE: float = 32768.0

__all__ = [
    "PCM16_DECODE_SCALE",
    "PCM16_ENCODE_SCALE",
    "PCM16_SAMPLE_WIDTH_BYTES",
    "TARGET_SAMPLE_RATE_HZ",
]
