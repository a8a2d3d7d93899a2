"""Immutable PCM16 mono audio frame at the wire sample rate."""

from __future__ import annotations

from dataclasses import field, dataclass

import numpy as np

from voice_relay.config.audio import TARGET_SAMPLE_RATE_HZ


@dataclass(frozen=True, eq=False, slots=True)
class AudioFrame:
    samples: np.ndarray
    sample_rate: int = field(default=TARGET_SAMPLE_RATE_HZ)

    def __post_init__(self) -> None:
        arr = np.asarray(self.samples, dtype=np.int16)
        if arr.ndim != 1:
            raise ValueError("AudioFrame samples must be mono (1-D)")
        if arr.flags.writeable:
            arr = arr.copy()
            arr.setflags(write=False)
        object.__setattr__(self, "samples", arr)

    @property
    def num_samples(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration_s(self) -> float:
        return self.num_samples / float(self.sample_rate)


__all__ = ["AudioFrame"]
