"""Recognition engine adapter and its decoding parameters."""

from __future__ import annotations

from typing import List, Optional, Protocol

import numpy as np

from ..audio.types import TranscriptionSegment
from .params import PARAMS_VERSION, EngineParams, SamplingStrategy, default_params
from .whisper_engine import SegmentCallback, WhisperEngine


class RecognitionEngine(Protocol):
    """Call contract the segmentation controller depends on."""

    def transcribe(
        self, samples: np.ndarray, prompt: Optional[str] = None
    ) -> List[TranscriptionSegment]: ...


__all__ = [
    "EngineParams",
    "PARAMS_VERSION",
    "RecognitionEngine",
    "SamplingStrategy",
    "SegmentCallback",
    "WhisperEngine",
    "default_params",
]
