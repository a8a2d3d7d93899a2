"""Container decode/encode (WAV, FLAC, OGG, ...) via soundfile.

Decoding runs in a worker thread so the event loop never blocks on libsndfile.
"""

from __future__ import annotations

import io
import asyncio
from pathlib import Path

import numpy as np
import soundfile as sf

from .frame import AudioFrame


def _read(source: bytes | str | Path) -> tuple[np.ndarray, int]:
    handle = io.BytesIO(source) if isinstance(source, bytes) else str(source)
    try:
        samples, sample_rate = sf.read(handle, dtype="float32", always_2d=True)
    except (sf.SoundFileError, RuntimeError) as exc:
        raise ValueError(f"unable to decode audio container: {exc}") from exc
    return samples, int(sample_rate)


async def decode_container(data: bytes) -> tuple[np.ndarray, int]:
    """Return ``(samples[frames, channels] as float32, sample_rate)``."""
    return await asyncio.to_thread(_read, data)


async def read_audio_file(path: str | Path) -> tuple[np.ndarray, int]:
    return await asyncio.to_thread(_read, Path(path))


def encode_wav(frame: AudioFrame) -> bytes:
    buf = io.BytesIO()
    sf.write(buf, frame.samples, frame.sample_rate, format="WAV", subtype="PCM_16")
    return buf.getvalue()


def write_wav(path: str | Path, samples: np.ndarray, sample_rate: int) -> None:
    """Write mono samples. Float buffers are stored as 32-bit float, int16 as PCM_16."""
    subtype = "FLOAT" if np.issubdtype(samples.dtype, np.floating) else "PCM_16"
    sf.write(str(path), samples, sample_rate, format="WAV", subtype=subtype)


__all__ = ["decode_container", "encode_wav", "read_audio_file", "write_wav"]
