"""Versioned decoding parameters for the recognition engine."""

from __future__ import annotations

import os
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

PARAMS_VERSION = 1


class SamplingStrategy(str, Enum):
    GREEDY = "greedy"
    BEAM_SEARCH = "beam_search"


class EngineParams(BaseModel):
    """Everything the adapter needs for a decode call.

    Built through :func:`default_params` and adjusted with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    version: int = PARAMS_VERSION
    strategy: SamplingStrategy = SamplingStrategy.GREEDY
    n_threads: int = Field(default=4, ge=1)
    language: Optional[str] = "en"
    translate: bool = False
    no_context: bool = True
    single_segment: bool = False
    token_timestamps: bool = False
    offset_ms: int = Field(default=0, ge=0)
    duration_ms: int = Field(default=0, ge=0)
    initial_prompt: Optional[str] = None
    suppress_blank: bool = True
    temperature: float = Field(default=0.0, ge=0.0)
    temperature_inc: float = Field(default=0.2, ge=0.0)
    entropy_thold: float = 2.4
    logprob_thold: float = -1.0
    no_speech_thold: float = 0.6
    max_initial_ts: float = 1.0
    length_penalty: Optional[float] = None
    best_of: int = Field(default=5, ge=1)
    beam_size: int = Field(default=5, ge=1)
    patience: float = 1.0

    def temperatures(self) -> Tuple[float, ...]:
        if self.temperature_inc <= 0:
            return (self.temperature,)
        values = []
        current = self.temperature
        while current <= 1.0 + 1e-9:
            values.append(round(current, 4))
            current += self.temperature_inc
        return tuple(values)

    def decode_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``faster_whisper.WhisperModel.transcribe``."""
        beam_size = self.beam_size if self.strategy is SamplingStrategy.BEAM_SEARCH else 1
        language = self.language if self.language not in (None, "", "auto") else None
        return {
            "language": language,
            "task": "translate" if self.translate else "transcribe",
            "beam_size": beam_size,
            "best_of": self.best_of,
            "patience": self.patience,
            "length_penalty": self.length_penalty if self.length_penalty is not None else 1.0,
            "temperature": self.temperatures(),
            "compression_ratio_threshold": self.entropy_thold,
            "log_prob_threshold": self.logprob_thold,
            "no_speech_threshold": self.no_speech_thold,
            "condition_on_previous_text": not self.no_context,
            "suppress_blank": self.suppress_blank,
            "without_timestamps": self.single_segment,
            "max_initial_timestamp": self.max_initial_ts,
            "word_timestamps": self.token_timestamps,
            "vad_filter": False,
        }


def default_params(strategy: SamplingStrategy = SamplingStrategy.GREEDY) -> EngineParams:
    threads = min(4, os.cpu_count() or 1)
    if strategy is SamplingStrategy.BEAM_SEARCH:
        return EngineParams(strategy=strategy, n_threads=threads, beam_size=5, patience=1.0)
    return EngineParams(strategy=strategy, n_threads=threads, best_of=5)


__all__ = ["EngineParams", "SamplingStrategy", "default_params", "PARAMS_VERSION"]
