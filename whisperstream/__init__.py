"""Streaming speech segmentation on top of faster-whisper."""

from __future__ import annotations

from .audio import StreamResult, TranscriptionSegment, VADConfig, ensure_supported_format
from .engine import EngineParams, WhisperEngine, default_params
from .session import CancellationToken, SegmentationController
from .settings import StreamSettings, get_settings

__version__ = "0.1.0"


def build_session(settings: StreamSettings | None = None) -> tuple[WhisperEngine, SegmentationController]:
    """Open an engine from settings and wire a controller around it."""
    settings = settings or get_settings()
    ensure_supported_format(settings.sample_rate)
    params = settings.engine_params()
    engine = WhisperEngine(
        settings.whisper_model,
        params,
        device=settings.whisper_device,
        compute_type=settings.whisper_compute_type,
        sample_rate=settings.sample_rate,
        call_timeout_s=settings.engine_call_timeout_s,
        mock=settings.whisper_mock_transcriber,
    ).open()
    controller = SegmentationController(
        engine,
        settings.vad_config(),
        sample_rate=settings.sample_rate,
        max_window_ms=settings.max_window_ms,
        carry_prompt=not params.no_context,
        transcript_mode=settings.transcript_mode,
    )
    return engine, controller


__all__ = [
    "CancellationToken",
    "EngineParams",
    "SegmentationController",
    "StreamResult",
    "StreamSettings",
    "TranscriptionSegment",
    "VADConfig",
    "WhisperEngine",
    "build_session",
    "default_params",
    "get_settings",
]
