"""PCM16 to float32 conversion."""

from __future__ import annotations

import numpy as np

from ..errors import MalformedAudio

PCM16_SCALE = 32768.0
WHISPER_SAMPLE_RATE = 16000
BYTES_PER_SAMPLE = 2


def pcm16_to_float32(raw: bytes) -> np.ndarray:
    """Decode little-endian int16 mono PCM into float32 samples in [-1, 1]."""
    if len(raw) % BYTES_PER_SAMPLE:
        raise MalformedAudio(
            f"PCM16 chunk must have an even byte length, got {len(raw)} bytes"
        )
    pcm = np.frombuffer(raw, dtype="<i2")
    return (pcm.astype(np.float32) / np.float32(PCM16_SCALE)).astype(np.float32, copy=False)


def ensure_supported_format(
    sample_rate: int, channels: int = 1, expected_rate: int = WHISPER_SAMPLE_RATE
) -> None:
    if channels != 1:
        raise MalformedAudio(f"Only mono audio is supported, got {channels} channels")
    if sample_rate != expected_rate:
        raise MalformedAudio(
            f"Expected {expected_rate} Hz audio, got {sample_rate} Hz (resample upstream)"
        )


__all__ = [
    "pcm16_to_float32",
    "ensure_supported_format",
    "PCM16_SCALE",
    "WHISPER_SAMPLE_RATE",
]
