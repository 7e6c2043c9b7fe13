"""Cooperative cancellation shared between a host and the search session.

A ``CancelToken`` is handed into every async entry point. The callee either
polls ``is_cancelled()`` or subscribes for the one-shot cancel signal with
``subscribe()``, which always disconnects on exit so a token reused across
many calls never piles up listeners.
"""

from __future__ import annotations

import contextlib
import itertools
import logging
import threading
from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)


class CancelToken:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._callbacks: dict[int, Callable[[], None]] = {}
        self._ids = itertools.count(1)

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks = list(self._callbacks.values())
        for callback in callbacks:
            try:
                callback()
            except Exception as exc:
                logger.warning("cancel callback failed", exc_info=exc)

    def is_cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    def connect(self, callback: Callable[[], None]) -> int:
        with self._lock:
            handler_id = next(self._ids)
            self._callbacks[handler_id] = callback
            fire_now = self._cancelled
        if fire_now:
            callback()
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        with self._lock:
            self._callbacks.pop(handler_id, None)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    @contextlib.contextmanager
    def subscribe(self, callback: Callable[[], None]) -> Iterator[int]:
        handler_id = self.connect(callback)
        try:
            yield handler_id
        finally:
            self.disconnect(handler_id)
