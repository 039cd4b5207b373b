"""Pytest configuration helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import pytest


def _ensure_repo_on_path() -> None:
    """Allow tests to import the package without installing it."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()

from whisperstream.audio.types import TranscriptionSegment  # noqa: E402
from whisperstream.errors import EngineCallFailure  # noqa: E402


def pcm_bytes(amplitude: float, count: int) -> bytes:
    """Constant-amplitude int16 LE chunk of ``count`` samples."""
    value = int(round(amplitude * 32768))
    return np.full(count, value, dtype="<i2").tobytes()


class FakeEngine:
    """Records every window it is asked to decode."""

    def __init__(self, sample_rate: int = 16000) -> None:
        self.sample_rate = sample_rate
        self.calls: List[np.ndarray] = []
        self.prompts: List[Optional[str]] = []
        self.fail_next = False

    def transcribe(self, samples: np.ndarray, prompt: Optional[str] = None) -> List[TranscriptionSegment]:
        if self.fail_next:
            self.fail_next = False
            raise EngineCallFailure("backend exploded")
        self.calls.append(np.array(samples, copy=True))
        self.prompts.append(prompt)
        end_ms = int(len(samples) * 1000 / self.sample_rate)
        return [TranscriptionSegment(text=f"utterance {len(self.calls)}", start_ms=0, end_ms=end_ms)]


@pytest.fixture()
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture()
def pcm():
    return pcm_bytes
