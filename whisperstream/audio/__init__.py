"""Audio helpers: PCM conversion, windowing and voice activity detection."""

from .converter import ensure_supported_format, pcm16_to_float32
from .types import ResultKind, SessionState, StreamResult, TranscriptionSegment
from .vad import VADConfig, detect, high_pass
from .window import SampleWindow

__all__ = [
    "ResultKind",
    "SampleWindow",
    "SessionState",
    "StreamResult",
    "TranscriptionSegment",
    "VADConfig",
    "detect",
    "ensure_supported_format",
    "high_pass",
    "pcm16_to_float32",
]
