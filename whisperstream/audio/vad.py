"""Energy-ratio voice activity detection over the tail of an analysis window."""

from __future__ import annotations

import logging

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

LOGGER = logging.getLogger("whisperstream.vad")


class VADConfig(BaseModel):
    """Immutable detector settings supplied once per session."""

    model_config = ConfigDict(frozen=True)

    trailing_window_ms: int = Field(default=1000, gt=0)
    energy_ratio_threshold: float = Field(default=0.6, ge=0.0)
    high_pass_cutoff_hz: float = Field(default=100.0, ge=0.0)
    verbose: bool = False


def high_pass(samples: np.ndarray, cutoff_hz: float, sample_rate_hz: int) -> np.ndarray:
    """Single-pole high-pass filter applied left to right into a new buffer."""
    data = np.array(samples, dtype=np.float32, copy=True)
    if data.size == 0 or cutoff_hz <= 0:
        return data
    rc = 1.0 / (2 * np.pi * cutoff_hz)
    dt = 1.0 / sample_rate_hz
    alpha = dt / (rc + dt)
    prev_in = float(data[0])
    prev_out = prev_in
    for idx in range(1, len(data)):
        sample = float(data[idx])
        data[idx] = alpha * (prev_out + sample - prev_in)
        prev_out = float(data[idx])
        prev_in = sample
    return data


def detect(window: np.ndarray, sample_rate_hz: int, config: VADConfig) -> bool:
    """Return True when the trailing ``trailing_window_ms`` is quiet relative to the window.

    Never mutates ``window``. A window no longer than the trailing span yields
    False: there is not enough history to call an utterance boundary.
    """
    n_samples = len(window)
    n_trailing = max(1, int(round(sample_rate_hz * config.trailing_window_ms / 1000.0)))
    if n_trailing >= n_samples:
        if config.verbose:
            LOGGER.info(
                "VAD: %d samples buffered, need more than %d", n_samples, n_trailing
            )
        return False

    if config.high_pass_cutoff_hz > 0:
        data = high_pass(window, config.high_pass_cutoff_hz, sample_rate_hz)
    else:
        data = np.array(window, dtype=np.float32, copy=True)

    magnitude = np.abs(data)
    energy_all = float(np.mean(magnitude))
    energy_last = float(np.mean(magnitude[n_samples - n_trailing :]))
    silent = energy_last <= config.energy_ratio_threshold * energy_all

    if config.verbose:
        LOGGER.info(
            "VAD: energy_all=%.6f energy_last=%.6f threshold=%.3f silent=%s",
            energy_all,
            energy_last,
            config.energy_ratio_threshold,
            silent,
        )
    return silent


__all__ = ["VADConfig", "detect", "high_pass"]
