"""Cooperative cancellation for streaming sessions."""

from __future__ import annotations

import threading


class CancellationToken:
    """Set from any thread; checked by the controller between chunks."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout=timeout)


__all__ = ["CancellationToken"]
