"""
Observable state container.

A store holds an immutable pydantic state model. ``set_state`` replaces it
with an updated copy and notifies subscribers with the new and previous
state.
"""
import threading
from typing import Any, Callable, Dict, Generic, List, TypeVar, Union

from pydantic import BaseModel

from src.utils.logger import logger

S = TypeVar("S", bound=BaseModel)

Listener = Callable[[Any, Any], None]
StateUpdate = Union[Dict[str, Any], Callable[[Any], Dict[str, Any]]]


class Store(Generic[S]):
    def __init__(self, initial_state: S):
        self._state = initial_state
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def get_state(self) -> S:
        return self._state

    def set_state(self, changes: StateUpdate) -> S:
        """
        Merge changes into the state.

        ``changes`` is a dict of fields, or a callable receiving the current
        state and returning one.
        """
        with self._lock:
            previous = self._state
            update = changes(previous) if callable(changes) else changes
            self._state = previous.model_copy(update=update)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(self._state, previous)
            except Exception as e:
                logger.error(f"{type(self).__name__} listener failed: {e}")
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
