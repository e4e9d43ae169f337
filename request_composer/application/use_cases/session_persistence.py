from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from request_composer.application.ports.snapshot_store import SnapshotStorePort
from request_composer.application.utils.state_codec import dump_state, load_state
from request_composer.domain.entities.composition_state import CompositionState


class SessionPersistenceGateway:
    """
    Write-behind snapshot of the in-progress composition.

    Bursts of schedule_persist() calls inside the debounce window collapse into
    a single write of the latest state. Last write wins; there is no versioning.
    """

    def __init__(
        self,
        store: SnapshotStorePort,
        key: str = "serviceRequestState",
        debounce_seconds: float = 0.5,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self._store = store
        self._key = key
        self._debounce_seconds = debounce_seconds
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: CompositionState | None = None
        self._generation = 0
        self._logger = logging.getLogger(__name__)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule_persist(self, state: CompositionState) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._pending = state
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._timer_factory(self._debounce_seconds, self._fire, args=(generation,))
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # a newer schedule_persist() or clear() superseded this timer
            if generation != self._generation or self._pending is None:
                return
            state = self._pending
            self._pending = None
            self._timer = None
            self._write(state)

    def flush(self) -> None:
        """Write the pending snapshot now instead of waiting for the timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self._pending is None:
                return
            state = self._pending
            self._pending = None
            self._generation += 1
            self._write(state)

    def _write(self, state: CompositionState) -> None:
        try:
            self._store.write(self._key, dump_state(state))
            self._logger.debug("Snapshot persisted", extra={"key": self._key, "selections": len(state.selections)})
        except Exception as e:
            self._logger.exception("Failed to persist snapshot", extra={"key": self._key, "error": str(e)})

    def restore(self) -> CompositionState | None:
        """Load the stored snapshot. Absent, unreadable or malformed snapshots yield None."""
        try:
            blob = self._store.read(self._key)
        except Exception as e:
            self._logger.warning("Snapshot unreadable, starting empty", extra={"key": self._key, "error": str(e)})
            return None
        if blob is None:
            return None
        try:
            state = load_state(blob)
        except ValueError as e:
            self._logger.warning("Snapshot corrupted, starting empty", extra={"key": self._key, "reason": str(e)})
            return None
        self._logger.info("Snapshot restored", extra={"key": self._key, "selections": len(state.selections)})
        return state

    def clear(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
            self._generation += 1
            try:
                self._store.delete(self._key)
            except Exception as e:
                self._logger.exception("Failed to clear snapshot", extra={"key": self._key, "error": str(e)})
