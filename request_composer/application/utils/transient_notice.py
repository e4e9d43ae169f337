from __future__ import annotations

import logging
import threading
from collections.abc import Callable


class TransientNotice:
    """A single warning message that clears itself after ttl_seconds."""

    def __init__(
        self,
        ttl_seconds: float = 3.0,
        on_clear: Callable[[str], None] | None = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._on_clear = on_clear
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._message: str | None = None
        self._timer: threading.Timer | None = None
        self._logger = logging.getLogger(__name__)

    def set_on_clear(self, on_clear: Callable[[str], None] | None) -> None:
        self._on_clear = on_clear

    def show(self, message: str) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._message = message
            self._timer = self._timer_factory(self._ttl_seconds, self._expire, args=(message,))
            self._timer.daemon = True
            self._timer.start()
        self._logger.warning("Notice shown", extra={"reason": message})

    def _expire(self, message: str) -> None:
        with self._lock:
            if self._message != message:
                return
            self._message = None
            self._timer = None
        if self._on_clear is not None:
            self._on_clear(message)

    def current(self) -> str | None:
        return self._message

    def clear(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._message = None
