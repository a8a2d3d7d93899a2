"""Conversions between captured float audio and base64 PCM16 mono @ 24 kHz.

Encode path: first channel -> linear resample -> clamp/quantize -> base64.
Decode path: base64 -> int16 samples -> float in [-1, 1).

All functions are pure; arrays returned from the decode path are read-only.
"""

from __future__ import annotations

import base64
import binascii

import numpy as np

from voice_relay.config.audio import (
    PCM16_DECODE_SCALE,
    PCM16_ENCODE_SCALE,
    TARGET_SAMPLE_RATE_HZ,
    PCM16_SAMPLE_WIDTH_BYTES,
)

from .frame import AudioFrame


def to_mono(samples: np.ndarray) -> np.ndarray:
    """Return the first channel of ``samples`` (frames x channels) as float32.

    Channels are not averaged; any channel after the first is dropped.
    """
    x = np.asarray(samples, dtype=np.float32)
    if x.ndim == 1:
        return x
    if x.ndim == 2:
        return x[:, 0]
    raise ValueError(f"expected 1-D or 2-D audio, got {x.ndim}-D")


def resampled_length(num_samples: int, source_rate: int, target_rate: int = TARGET_SAMPLE_RATE_HZ) -> int:
    # round-half-up of num_samples * target / source, in integer arithmetic
    return (2 * int(num_samples) * int(target_rate) + int(source_rate)) // (2 * int(source_rate))


def resample_linear(
    samples: np.ndarray,
    source_rate: int,
    target_rate: int = TARGET_SAMPLE_RATE_HZ,
) -> np.ndarray:
    if source_rate <= 0 or target_rate <= 0:
        raise ValueError("sample rates must be positive")

    x = np.asarray(samples, dtype=np.float32)
    if source_rate == target_rate:
        return x

    n = int(x.shape[0])
    out_len = resampled_length(n, source_rate, target_rate)
    if n == 0 or out_len == 0:
        return np.zeros(0, dtype=np.float32)

    ratio = float(source_rate) / float(target_rate)
    positions = np.arange(out_len, dtype=np.float64) * ratio
    lo = np.minimum(np.floor(positions).astype(np.int64), n - 1)
    hi = np.minimum(lo + 1, n - 1)
    frac = positions - lo

    out = x[lo] * (1.0 - frac) + x[hi] * frac
    return out.astype(np.float32)


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Quantize floats to int16.

    Values are clamped to [-1, 1] and rounded half-up after scaling by 32767,
    so 1.0 -> 32767 and -1.0 -> -32767; -32768 is never produced.
    """
    x = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    return np.floor(x * PCM16_ENCODE_SCALE + 0.5).astype(np.int16)


def pcm16_to_float(samples: np.ndarray) -> np.ndarray:
    return np.asarray(samples, dtype=np.int16).astype(np.float32) / np.float32(PCM16_DECODE_SCALE)


def pcm16_to_base64(samples: np.ndarray) -> str:
    pcm = np.asarray(samples, dtype=np.int16).astype("<i2", copy=False)
    return base64.b64encode(pcm.tobytes()).decode("ascii")


def base64_to_pcm16(data: str) -> np.ndarray:
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid base64 audio: {exc}") from exc
    if len(raw) % PCM16_SAMPLE_WIDTH_BYTES:
        raise ValueError("PCM16 payload has an odd number of bytes")
    return np.frombuffer(raw, dtype="<i2").astype(np.int16, copy=False)


def encode_audio(samples: np.ndarray, sample_rate: int) -> str:
    """Captured float audio (any channel count, any rate) -> base64 PCM16 mono @ 24 kHz."""
    mono = to_mono(samples)
    resampled = resample_linear(mono, sample_rate, TARGET_SAMPLE_RATE_HZ)
    return pcm16_to_base64(float_to_pcm16(resampled))


def decode_audio(data: str) -> AudioFrame:
    return AudioFrame(samples=base64_to_pcm16(data), sample_rate=TARGET_SAMPLE_RATE_HZ)


__all__ = [
    "base64_to_pcm16",
    "decode_audio",
    "encode_audio",
    "float_to_pcm16",
    "pcm16_to_base64",
    "pcm16_to_float",
    "resample_linear",
    "resampled_length",
    "to_mono",
]
