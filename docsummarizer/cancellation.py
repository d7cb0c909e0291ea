"""Cooperative cancellation token polled at chunk boundaries."""

from __future__ import annotations

import threading

from .exceptions import SummarizationCancelled


class CancellationToken:
    """Thread-safe flag shared between a caller and a running summary."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SummarizationCancelled("Summarization was cancelled")
