"""faster-whisper backed recognition engine adapter."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, List, Optional

import numpy as np
from faster_whisper import WhisperModel

from ..audio.types import TranscriptionSegment
from ..errors import EngineCallFailure, EngineClosed, EngineInitFailure
from ..metrics import ENGINE_FAILURES, ENGINE_LATENCY
from .params import EngineParams, default_params

LOGGER = logging.getLogger("whisperstream.engine")

SegmentCallback = Callable[[TranscriptionSegment], None]


class WhisperEngine:
    """Owns one model context; at most one transcribe call runs against it at a time."""

    def __init__(
        self,
        model_path: str,
        params: EngineParams | None = None,
        *,
        device: str = "cpu",
        compute_type: str = "int8",
        sample_rate: int = 16000,
        call_timeout_s: float | None = None,
        mock: bool = False,
        on_segment: SegmentCallback | None = None,
    ) -> None:
        self.model_path = model_path
        self.params = params or default_params()
        self.device = device
        self.compute_type = compute_type
        self.sample_rate = sample_rate
        self.call_timeout_s = call_timeout_s
        self.on_segment = on_segment
        self._mock = mock
        self._lock = threading.Lock()
        self._model: WhisperModel | None = None
        self._opened = False
        self._closed = False
        if self._mock:
            LOGGER.warning(
                "Whisper mock mode enabled (set WHISPER_USE_MOCK=0 and configure "
                "WHISPER_MODEL to enable real transcription)."
            )

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    def open(self) -> "WhisperEngine":
        if self._closed:
            raise EngineInitFailure("Engine context was already released")
        if self._opened:
            return self
        if not self._mock:
            try:
                self._model = WhisperModel(
                    self.model_path,
                    device=self.device,
                    compute_type=self.compute_type,
                    cpu_threads=self.params.n_threads,
                )
            except Exception as exc:  # pragma: no cover - hardware/env dep
                LOGGER.error("Failed to load Whisper model '%s': %s", self.model_path, exc)
                raise EngineInitFailure(
                    f"Could not load Whisper model '{self.model_path}': {exc}"
                ) from exc
        self._opened = True
        LOGGER.info("Whisper engine ready (model=%s, mock=%s)", self.model_path, self._mock)
        return self

    def close(self) -> None:
        with self._lock:
            self._model = None
            self._closed = True
        LOGGER.info("Whisper engine released (model=%s)", self.model_path)

    def __enter__(self) -> "WhisperEngine":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def transcribe(
        self, samples: np.ndarray, prompt: Optional[str] = None
    ) -> List[TranscriptionSegment]:
        if self._closed:
            raise EngineClosed("Engine context used after release")
        if not self._opened:
            raise EngineCallFailure("Engine context is not open; call open() first")
        timeout = -1 if self.call_timeout_s is None else self.call_timeout_s
        if not self._lock.acquire(timeout=timeout):
            ENGINE_FAILURES.inc()
            raise EngineCallFailure(
                f"Engine context busy for more than {self.call_timeout_s:.2f}s"
            )
        start = time.perf_counter()
        try:
            if self._closed:
                raise EngineClosed("Engine context used after release")
            audio = self._clip(np.asarray(samples, dtype=np.float32))
            if self._mock:
                segments = self._mock_segments(audio)
            else:
                segments = self._decode(audio, prompt, start)
        except EngineCallFailure:
            ENGINE_FAILURES.inc()
            raise
        except Exception as exc:
            ENGINE_FAILURES.inc()
            LOGGER.error("Whisper transcribe failed: %s", exc)
            raise EngineCallFailure(f"Transcription failed: {exc}") from exc
        finally:
            ENGINE_LATENCY.observe(time.perf_counter() - start)
            self._lock.release()
        return segments

    def _clip(self, audio: np.ndarray) -> np.ndarray:
        offset = int(self.sample_rate * self.params.offset_ms / 1000)
        if self.params.duration_ms:
            end = offset + int(self.sample_rate * self.params.duration_ms / 1000)
            return audio[offset:end]
        return audio[offset:]

    def _decode(
        self, audio: np.ndarray, prompt: Optional[str], started: float
    ) -> List[TranscriptionSegment]:
        if self._model is None:
            raise EngineClosed("Engine model is not loaded")
        options = self.params.decode_options()
        initial_prompt = prompt if prompt else self.params.initial_prompt
        raw_segments, _info = self._model.transcribe(
            audio, initial_prompt=initial_prompt, **options
        )
        return self._collect(raw_segments, started)

    def _collect(self, raw_segments: Iterable, started: float) -> List[TranscriptionSegment]:
        # The segment iterator is lazy: decoding happens while we consume it.
        segments: List[TranscriptionSegment] = []
        for raw in raw_segments:
            segment = TranscriptionSegment(
                text=(getattr(raw, "text", "") or "").strip(),
                start_ms=self.params.offset_ms + int(round((getattr(raw, "start", 0.0) or 0.0) * 1000)),
                end_ms=self.params.offset_ms + int(round((getattr(raw, "end", 0.0) or 0.0) * 1000)),
            )
            segments.append(segment)
            if self.on_segment:
                self.on_segment(segment)
            if self.call_timeout_s is not None and time.perf_counter() - started > self.call_timeout_s:
                raise EngineCallFailure(
                    f"Transcription exceeded {self.call_timeout_s:.2f}s budget"
                )
        return segments

    def _mock_segments(self, audio: np.ndarray) -> List[TranscriptionSegment]:
        duration_ms = int(len(audio) * 1000 / self.sample_rate)
        segment = TranscriptionSegment(
            text=f"[mock transcript {len(audio)} samples]",
            start_ms=self.params.offset_ms,
            end_ms=self.params.offset_ms + duration_ms,
        )
        if self.on_segment:
            self.on_segment(segment)
        return [segment]


__all__ = ["WhisperEngine", "SegmentCallback"]
