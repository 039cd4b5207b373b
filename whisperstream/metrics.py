"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    CONTENT_TYPE_LATEST,
    generate_latest,
)

CHUNK_COUNTER = Counter(
    "stream_chunks_total",
    "Audio chunks handed to a segmentation session",
    labelnames=("outcome",),
)

RESULT_COUNTER = Counter(
    "stream_results_total",
    "Transcription results emitted by kind",
    labelnames=("kind",),
)

ENGINE_LATENCY = Histogram(
    "engine_transcribe_seconds",
    "Wall time spent inside a single engine transcribe call",
)

ENGINE_FAILURES = Counter(
    "engine_failures_total",
    "Engine calls that raised or timed out",
)

WINDOW_EVICTED_SAMPLES = Counter(
    "window_evicted_samples_total",
    "Samples dropped from the head of an analysis window to honour its bound",
)


def render_latest() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "CHUNK_COUNTER",
    "RESULT_COUNTER",
    "ENGINE_LATENCY",
    "ENGINE_FAILURES",
    "WINDOW_EVICTED_SAMPLES",
    "render_latest",
]
