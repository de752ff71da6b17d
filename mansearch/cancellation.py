"""SPDX-License-Identifier: GPL-3.0-only

Cooperative cancellation shared between a caller and in-flight searches.

The token may be cancelled from any thread. Work observing it polls
``is_cancelled()`` between units and may register callbacks that fire once
when cancellation happens (used to kill a waiting child process).
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Dict

LOGGER = logging.getLogger("mansearch.cancellation")


class OperationCancelled(Exception):
    """Raised inside the core when a token is observed cancelled."""

    def __init__(self) -> None:
        super().__init__("Operation cancelled")


class CancellationToken:
    """Level-triggered cancellation flag (once set, stays set)."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: Dict[int, Callable[[], None]] = {}
        self._ids = itertools.count(1)

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks.values())
            self._callbacks.clear()
        for cb in callbacks:
            try:
                cb()
            except Exception:  # callbacks belong to other parties; keep notifying
                LOGGER.exception("Cancellation callback failed")

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def connect(self, callback: Callable[[], None]) -> int:
        """Register ``callback`` to run when the token is cancelled.

        If the token is already cancelled the callback runs immediately on
        the calling thread and 0 is returned.

        Returns:
            int: Handler id for ``disconnect`` (0 when nothing was stored).
        """
        with self._lock:
            if not self._event.is_set():
                handler_id = next(self._ids)
                self._callbacks[handler_id] = callback
                return handler_id
        callback()
        return 0

    def disconnect(self, handler_id: int) -> None:
        with self._lock:
            self._callbacks.pop(handler_id, None)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled()})"
