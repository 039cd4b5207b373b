"""Streaming session orchestration."""

from .cancel import CancellationToken
from .controller import ErrorCallback, ResultCallback, SegmentationController

__all__ = ["CancellationToken", "ErrorCallback", "ResultCallback", "SegmentationController"]
