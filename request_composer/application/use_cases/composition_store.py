from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from request_composer.application.dto.composition_actions import CompositionAction
from request_composer.application.use_cases.selection_reducer import INITIAL_STATE, reduce_composition
from request_composer.domain.entities.composition_state import CompositionState

Listener = Callable[[CompositionState], None]


class CompositionStore:
    """
    Holds the current CompositionState and applies the reducer to it.
    Listeners run after every transition that produced a new state.
    """

    def __init__(
        self,
        initial: CompositionState = INITIAL_STATE,
        reducer: Callable[[CompositionState, CompositionAction], CompositionState] = reduce_composition,
    ) -> None:
        self._state = initial
        self._reducer = reducer
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> CompositionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: CompositionAction) -> CompositionState:
        with self._lock:
            previous = self._state
            self._state = self._reducer(previous, action)
            current = self._state
        if current is previous:
            return current
        for listener in list(self._listeners):
            try:
                listener(current)
            except Exception as e:
                self._logger.exception(
                    "State listener failed",
                    extra={"action": type(action).__name__, "error": str(e)},
                )
        return current
