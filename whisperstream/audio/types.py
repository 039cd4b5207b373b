"""Dataclasses shared across audio helpers and the session controller."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union


@dataclass(frozen=True, slots=True)
class TranscriptionSegment:
    """Text span returned by the engine (milliseconds relative to the window start)."""

    text: str
    start_ms: int
    end_ms: int


class SessionState(str, Enum):
    ACCUMULATING = "accumulating"
    EMITTED_FINAL = "emitted_final"


class ResultKind(str, Enum):
    PARTIAL = "partial"
    FINAL = "final"


@dataclass(frozen=True, slots=True)
class StreamResult:
    """Outcome of one processed chunk."""

    kind: ResultKind
    text: str
    segments: Tuple[TranscriptionSegment, ...] = field(default_factory=tuple)
    window_ms: int = 0

    @property
    def is_final(self) -> bool:
        return self.kind is ResultKind.FINAL

    def render(self, mode: str = "text") -> Union[str, List[Dict[str, Any]]]:
        if mode == "text":
            return self.text
        if mode == "segments":
            return [asdict(segment) for segment in self.segments]
        raise ValueError(f"Unknown transcript mode {mode!r}")


def join_segments(segments: Tuple[TranscriptionSegment, ...]) -> str:
    pieces = [segment.text.strip() for segment in segments]
    return " ".join(piece for piece in pieces if piece).strip()


__all__ = [
    "TranscriptionSegment",
    "SessionState",
    "ResultKind",
    "StreamResult",
    "join_segments",
]
