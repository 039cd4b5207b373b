"""Exception hierarchy shared across the streaming pipeline."""

from __future__ import annotations


class WhisperStreamError(Exception):
    pass


class MalformedAudio(WhisperStreamError):
    """Chunk could not be interpreted as mono int16 PCM at the session rate."""


class EngineInitFailure(WhisperStreamError):
    """The recognition model/context could not be created."""


class EngineCallFailure(WhisperStreamError):
    """A transcribe call failed or exceeded its time budget."""


class EngineClosed(EngineCallFailure):
    """The engine context was used after release."""


class SessionBusy(WhisperStreamError):
    pass


__all__ = [
    "WhisperStreamError",
    "MalformedAudio",
    "EngineInitFailure",
    "EngineCallFailure",
    "EngineClosed",
    "SessionBusy",
]
