"""Cooperative cancellation for long candidate scans."""

from __future__ import annotations

import threading

from embedsearch.errors import Cancelled


class CancellationToken:
    """Thread-safe flag checked between candidates during a scan."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled("Similarity search was cancelled")
