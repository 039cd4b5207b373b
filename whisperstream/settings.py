"""Streaming settings resolved from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field

from .audio.vad import VADConfig
from .engine.params import EngineParams, SamplingStrategy, default_params


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


class StreamSettings(BaseModel):
    whisper_model: str = Field(default=os.getenv("WHISPER_MODEL", "base.en"))
    whisper_device: str = Field(default=os.getenv("WHISPER_DEVICE", "cpu"))
    whisper_compute_type: str = Field(
        default=os.getenv("WHISPER_COMPUTE_TYPE", "int8")
    )
    whisper_mock_transcriber: bool = Field(default=_flag("WHISPER_USE_MOCK"))
    whisper_strategy: SamplingStrategy = Field(
        default=os.getenv("WHISPER_STRATEGY", "greedy"), validate_default=True
    )
    whisper_threads: int = Field(
        default=int(os.getenv("WHISPER_THREADS", str(min(4, os.cpu_count() or 1)))), ge=1
    )
    whisper_language: str = Field(default=os.getenv("WHISPER_LANGUAGE", "en"))
    whisper_translate: bool = Field(default=_flag("WHISPER_TRANSLATE"))
    whisper_keep_context: bool = Field(default=_flag("WHISPER_KEEP_CONTEXT"))
    sample_rate: int = Field(default=int(os.getenv("SAMPLE_RATE", "16000")), gt=0)
    max_window_ms: int = Field(default=int(os.getenv("MAX_WINDOW_MS", "30000")), gt=0)
    vad_trailing_ms: int = Field(default=int(os.getenv("VAD_TRAILING_MS", "1000")), gt=0)
    vad_threshold: float = Field(default=float(os.getenv("VAD_THRESHOLD", "0.6")), ge=0.0)
    vad_high_pass_hz: float = Field(
        default=float(os.getenv("VAD_HIGH_PASS_HZ", "100")), ge=0.0
    )
    vad_verbose: bool = Field(default=_flag("VAD_VERBOSE"))
    engine_call_timeout_s: float | None = Field(
        default=_optional_float("ENGINE_CALL_TIMEOUT_S")
    )
    transcript_mode: Literal["text", "segments"] = Field(
        default=os.getenv("TRANSCRIPT_MODE", "text"), validate_default=True
    )

    def vad_config(self) -> VADConfig:
        return VADConfig(
            trailing_window_ms=self.vad_trailing_ms,
            energy_ratio_threshold=self.vad_threshold,
            high_pass_cutoff_hz=self.vad_high_pass_hz,
            verbose=self.vad_verbose,
        )

    def engine_params(self) -> EngineParams:
        return default_params(self.whisper_strategy).model_copy(
            update={
                "n_threads": self.whisper_threads,
                "language": self.whisper_language,
                "translate": self.whisper_translate,
                "no_context": not self.whisper_keep_context,
            }
        )


@lru_cache()
def get_settings() -> StreamSettings:
    return StreamSettings()
