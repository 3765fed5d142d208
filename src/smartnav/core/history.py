"""Back/forward history (source of truth).

``HistoryEntry``
    Frozen value ``(path, params, props)``. ``HistoryEntry.capture`` copies its
    inputs: params are deep-copied (they are plain transportable values);
    each prop value is deep-copied too, and kept by reference only when it
    cannot be copied (locks, sockets, native handles). Later mutation of the
    live params/props therefore cannot reach an entry already stored in the
    stack.

``HistoryStack``
    Two chronological lists.

    - ``push(entry)`` appends to ``past``.
    - ``clear_future()`` drops every redo target (branch invalidation).
    - ``back(current)`` pops the tail of ``past`` and inserts ``current`` at the
      head of ``future``; returns the popped entry or ``None`` when ``past`` is
      empty (the stack is left untouched).
    - ``forward(current)`` pops the head of ``future`` and appends ``current``
      to ``past``; ``None`` when ``future`` is empty.
    - ``replace(past, future)`` installs both sides wholesale (window handoff).

    Identical consecutive paths are never merged.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

__all__ = ["HistoryEntry", "HistoryStack"]


def _copy_props(props: Mapping[str, Any]) -> Dict[str, Any]:
    copied: Dict[str, Any] = {}
    for key, value in props.items():
        try:
            copied[key] = copy.deepcopy(value)
        except (TypeError, copy.Error):
            copied[key] = value
    return copied


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of a previously active route."""

    path: str
    params: Dict[str, Any] = field(default_factory=dict)
    props: Optional[Dict[str, Any]] = None

    @classmethod
    def capture(
        cls,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        props: Optional[Mapping[str, Any]] = None,
    ) -> "HistoryEntry":
        return cls(
            path=path,
            params=copy.deepcopy(dict(params or {})),
            props=_copy_props(props) if props is not None else None,
        )


class HistoryStack:
    """Past/future stacks with branch invalidation."""

    __slots__ = ("_past", "_future")

    def __init__(self) -> None:
        self._past: List[HistoryEntry] = []
        self._future: List[HistoryEntry] = []

    @property
    def past(self) -> List[HistoryEntry]:
        return list(self._past)

    @property
    def future(self) -> List[HistoryEntry]:
        return list(self._future)

    def can_go_back(self) -> bool:
        return len(self._past) > 0

    def can_go_forward(self) -> bool:
        return len(self._future) > 0

    def push(self, entry: HistoryEntry) -> None:
        self._past.append(entry)

    def clear_future(self) -> None:
        self._future.clear()

    def back(self, current: HistoryEntry) -> Optional[HistoryEntry]:
        if not self._past:
            return None
        previous = self._past.pop()
        self._future.insert(0, current)
        return previous

    def forward(self, current: HistoryEntry) -> Optional[HistoryEntry]:
        if not self._future:
            return None
        following = self._future.pop(0)
        self._past.append(current)
        return following

    def replace(self, past: Iterable[HistoryEntry], future: Iterable[HistoryEntry]) -> None:
        self._past = list(past)
        self._future = list(future)

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    def __repr__(self) -> str:
        return f"HistoryStack(past={len(self._past)}, future={len(self._future)})"
