from .frame import AudioFrame
from .codec import (
    to_mono,
    decode_audio,
    encode_audio,
    float_to_pcm16,
    pcm16_to_float,
    base64_to_pcm16,
    pcm16_to_base64,
    resample_linear,
)

__all__ = [
    "AudioFrame",
    "base64_to_pcm16",
    "decode_audio",
    "encode_audio",
    "float_to_pcm16",
    "pcm16_to_base64",
    "pcm16_to_float",
    "resample_linear",
    "to_mono",
]
