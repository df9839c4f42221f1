from __future__ import annotations

from typing import Any, Callable, Generic, List, TypeVar

from pydantic import BaseModel

StateT = TypeVar("StateT", bound=BaseModel)
Subscriber = Callable[[StateT], None]


class ObservableState(Generic[StateT]):
    """
    Holds a mutable state model and notifies subscribers on each update.

    Updates are expected on the event loop thread that owns the pipeline;
    subscribers receive the live state object, use snapshot() to keep a copy.
    """

    def __init__(self, state: StateT):
        self._state = state
        self._subscribers: List[Subscriber] = []

    @property
    def state(self) -> StateT:
        return self._state

    def snapshot(self) -> StateT:
        return self._state.model_copy()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def update(self, **changes: Any) -> None:
        for name, value in changes.items():
            if name not in type(self._state).model_fields:
                raise AttributeError(f"Unknown state field: {name}")
            setattr(self._state, name, value)
        for callback in list(self._subscribers):
            callback(self._state)
