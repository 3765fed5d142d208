"""Minimal observable value holder (get / set / subscribe)."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, List, Optional, TypeVar

__all__ = ["Observable"]

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Observable(Generic[T]):
    """Hold a value and notify subscribers when it is replaced.

    Subscribers receive ``(new, old)``. Assigning the identical object is not
    a change. A failing subscriber is logged and does not stop the others, so
    one broken view never leaves the navigator half-updated.
    """

    __slots__ = ("name", "_value", "_subscribers")

    def __init__(self, value: T, *, name: Optional[str] = None) -> None:
        self.name = name
        self._value = value
        self._subscribers: List[Callable[[T, T], Any]] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        old = self._value
        if value is old:
            return
        self._value = value
        for callback in list(self._subscribers):
            try:
                callback(value, old)
            except Exception:
                logger.exception("Subscriber of %s failed", self.name or "observable")

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, callback: Callable[[T, T], Any]) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it."""
        if not callable(callback):
            raise TypeError("subscribe() requires a callable")
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __repr__(self) -> str:
        return f"Observable({self.name or ''}={self._value!r})"
