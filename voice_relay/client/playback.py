"""Queue of assistant audio chunks, played back (or saved) in arrival order."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from voice_relay.audio.container import write_wav
from voice_relay.config.audio import TARGET_SAMPLE_RATE_HZ
from voice_relay.audio import AudioFrame, decode_audio, pcm16_to_float

logger = logging.getLogger(__name__)


class PlaybackQueue:
    def __init__(self) -> None:
        self._frames: list[AudioFrame] = []
        self.playing = False

    def __len__(self) -> int:
        return len(self._frames)

    def enqueue(self, delta_b64: str) -> AudioFrame | None:
        try:
            frame = decode_audio(delta_b64)
        except ValueError as exc:
            logger.warning("dropping undecodable audio delta: %s", exc)
            return None
        self._frames.append(frame)
        self.playing = True
        return frame

    def mark_done(self) -> None:
        self.playing = False

    @property
    def duration_s(self) -> float:
        return sum(frame.duration_s for frame in self._frames)

    def to_frame(self) -> AudioFrame:
        if not self._frames:
            return AudioFrame(samples=np.zeros(0, dtype=np.int16), sample_rate=TARGET_SAMPLE_RATE_HZ)
        return AudioFrame(samples=np.concatenate([frame.samples for frame in self._frames]))

    def to_buffer(self) -> np.ndarray:
        """Playable float32 mono buffer: each queued sample divided by 32768."""
        return pcm16_to_float(self.to_frame().samples)

    def write(self, path: str | Path) -> int:
        """Write the playback buffer as a float WAV. Returns the sample count."""
        buffer = self.to_buffer()
        write_wav(path, buffer, TARGET_SAMPLE_RATE_HZ)
        return int(buffer.shape[0])


__all__ = ["PlaybackQueue"]
