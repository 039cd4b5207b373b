"""Segmentation controller: gates engine calls on VAD and resets the window per utterance."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Iterator, List, Optional

from ..audio.converter import pcm16_to_float32
from ..audio.types import ResultKind, SessionState, StreamResult, TranscriptionSegment, join_segments
from ..audio.vad import VADConfig, detect
from ..audio.window import DEFAULT_MAX_DURATION_MS, SampleWindow
from ..engine import RecognitionEngine
from ..errors import EngineCallFailure, MalformedAudio, SessionBusy
from ..metrics import CHUNK_COUNTER, RESULT_COUNTER
from .cancel import CancellationToken

LOGGER = logging.getLogger("whisperstream.session")

ResultCallback = Callable[[StreamResult], None]
ErrorCallback = Callable[[Exception], None]


class SegmentationController:
    """Drive one streaming session.

    Each chunk is converted, appended to the session window and the whole
    window is re-decoded. When the VAD reports a silent tail the decode is
    emitted as final and the window starts over empty; otherwise it is a
    partial result and the window keeps growing.
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        vad_config: VADConfig | None = None,
        *,
        sample_rate: int = 16000,
        max_window_ms: int = DEFAULT_MAX_DURATION_MS,
        carry_prompt: bool = False,
        transcript_mode: str = "text",
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.engine = engine
        self.vad_config = vad_config or VADConfig()
        self.sample_rate = sample_rate
        self.window = SampleWindow(sample_rate, max_window_ms)
        self.carry_prompt = carry_prompt
        self.transcript_mode = transcript_mode
        self.on_error = on_error
        self._state = SessionState.ACCUMULATING
        self._prompt: Optional[str] = None
        self._listeners: List[ResultCallback] = []
        self._busy = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    def on_result(self, callback: ResultCallback) -> None:
        self._listeners.append(callback)

    def render(self, result: StreamResult):
        return result.render(self.transcript_mode)

    def process_chunk(self, raw: bytes) -> Optional[StreamResult]:
        """Handle one PCM16 chunk; returns None when the chunk was dropped or empty."""
        if not self._busy.acquire(blocking=False):
            raise SessionBusy("A chunk is already being processed by this session")
        try:
            try:
                samples = pcm16_to_float32(raw)
            except MalformedAudio as exc:
                CHUNK_COUNTER.labels(outcome="dropped").inc()
                LOGGER.warning("Dropping malformed chunk: %s", exc)
                if self.on_error:
                    self.on_error(exc)
                return None

            if samples.size == 0:
                LOGGER.debug("Ignoring empty chunk")
                return None

            self.window.append(samples)
            segments = self._transcribe()
            silent = detect(self.window.samples, self.sample_rate, self.vad_config)
            CHUNK_COUNTER.labels(outcome="processed").inc()
            if silent:
                return self._finalize(segments)
            return self._emit(ResultKind.PARTIAL, segments)
        finally:
            self._busy.release()

    def flush(self) -> Optional[StreamResult]:
        """Emit whatever is buffered as a final result (end of stream)."""
        if not self._busy.acquire(blocking=False):
            raise SessionBusy("A chunk is already being processed by this session")
        try:
            if len(self.window) == 0:
                return None
            segments = self._transcribe()
            return self._finalize(segments)
        finally:
            self._busy.release()

    def stream(
        self,
        chunks: Iterable[bytes],
        cancel: CancellationToken | None = None,
        *,
        flush: bool = True,
    ) -> Iterator[StreamResult]:
        for chunk in chunks:
            if cancel is not None and cancel.cancelled:
                LOGGER.info("Session cancelled; %d ms left unflushed", self.window.duration_ms)
                return
            result = self.process_chunk(chunk)
            if result is not None:
                yield result
        if flush:
            tail = self.flush()
            if tail is not None:
                yield tail

    def _transcribe(self) -> tuple[TranscriptionSegment, ...]:
        prompt = self._prompt if self.carry_prompt else None
        try:
            return tuple(self.engine.transcribe(self.window.samples, prompt=prompt))
        except EngineCallFailure as exc:
            CHUNK_COUNTER.labels(outcome="engine_error").inc()
            LOGGER.error(
                "Engine call failed with %d ms buffered: %s", self.window.duration_ms, exc
            )
            raise

    def _finalize(self, segments: tuple[TranscriptionSegment, ...]) -> StreamResult:
        result = self._build(ResultKind.FINAL, segments)
        self.window.reset()
        if self.carry_prompt and result.text:
            self._prompt = result.text
        # Listeners observe EMITTED_FINAL with the window already cleared.
        self._state = SessionState.EMITTED_FINAL
        try:
            self._notify(result)
        finally:
            self._state = SessionState.ACCUMULATING
        LOGGER.debug("Final emitted (%d ms); window reset", result.window_ms)
        return result

    def _emit(self, kind: ResultKind, segments: tuple[TranscriptionSegment, ...]) -> StreamResult:
        result = self._build(kind, segments)
        self._notify(result)
        return result

    def _build(self, kind: ResultKind, segments: tuple[TranscriptionSegment, ...]) -> StreamResult:
        RESULT_COUNTER.labels(kind=kind.value).inc()
        return StreamResult(
            kind=kind,
            text=join_segments(segments),
            segments=segments,
            window_ms=self.window.duration_ms,
        )

    def _notify(self, result: StreamResult) -> None:
        for listener in self._listeners:
            try:
                listener(result)
            except Exception:
                LOGGER.exception("Result listener failed on %s result", result.kind.value)


__all__ = ["SegmentationController", "ResultCallback", "ErrorCallback"]
