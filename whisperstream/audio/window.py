"""Bounded, append-only analysis window for streaming recognition."""

from __future__ import annotations

import logging

import numpy as np

from ..metrics import WINDOW_EVICTED_SAMPLES

LOGGER = logging.getLogger("whisperstream.window")

DEFAULT_MAX_DURATION_MS = 30_000


class SampleWindow:
    """Accumulates float32 samples and drops the oldest audio past ``max_duration_ms``."""

    def __init__(self, sample_rate: int, max_duration_ms: int = DEFAULT_MAX_DURATION_MS) -> None:
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        if max_duration_ms <= 0:
            raise ValueError(f"max_duration_ms must be positive, got {max_duration_ms}")
        self.sample_rate = sample_rate
        self.max_duration_ms = max_duration_ms
        self.max_samples = max(1, int(round(sample_rate * max_duration_ms / 1000.0)))
        self.evicted = 0
        self._samples = np.zeros(0, dtype=np.float32)

    @property
    def samples(self) -> np.ndarray:
        return self._samples

    @property
    def duration_ms(self) -> int:
        return int(len(self._samples) * 1000 / self.sample_rate)

    def __len__(self) -> int:
        return len(self._samples)

    def append(self, samples: np.ndarray) -> np.ndarray:
        incoming = np.asarray(samples, dtype=np.float32)
        if incoming.size == 0:
            return self._samples
        combined = np.concatenate([self._samples, incoming.reshape(-1)])
        overflow = len(combined) - self.max_samples
        if overflow > 0:
            combined = combined[overflow:].copy()
            self.evicted += overflow
            WINDOW_EVICTED_SAMPLES.inc(overflow)
            LOGGER.warning(
                "Window exceeded %d ms; dropped %d oldest samples",
                self.max_duration_ms,
                overflow,
            )
        self._samples = combined
        return self._samples

    def reset(self) -> None:
        self._samples = np.zeros(0, dtype=np.float32)


__all__ = ["SampleWindow", "DEFAULT_MAX_DURATION_MS"]
