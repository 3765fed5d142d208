"""One-shot navigation handoff between navigator instances (source of truth).

A navigator that detaches into a new window writes its full navigation
context to a keyed slot in shared string storage; the navigator of the new
window consumes that slot exactly once.

``HandoffChannel(storage=None, *, ttl=300.0, prefix="smartnav.handoff.", clock=time.time)``

- ``storage``: any ``MutableMapping[str, str]`` shared by both sides. A private
  dict is used when omitted (both navigators living in one process).
- ``ttl``: seconds after which an unconsumed slot is considered abandoned.
  ``None`` disables expiry.

``begin_handoff(payload) -> handoff_id``

- Mints a fresh ``uuid4`` hex id; ids are never reused.
- Serializes every param/prop value of the current state and of each history
  entry individually through :func:`smartnav.core.codec.encode_value`. Values
  that cannot be transported (callables, arbitrary objects) are dropped with a
  warning; they belong to the sending window only.
- Purges expired slots, then writes one JSON document under
  ``prefix + handoff_id``::

      {"created": <ts>, "path": "...", "params": {k: "<str>"},
       "props": {k: "<str>"} | null,
       "history": {"past": [<entry>], "future": [<entry>]}}

``consume_handoff(handoff_id) -> HandoffPayload | None``

- ``pop``s the slot (read and delete in one step): a second call for the same
  id returns ``None``.
- Malformed JSON, a wrong document shape (checked with pydantic models) or an
  expired slot are logged and reported as ``None`` so the caller can fall back
  to its next source of state.
- Every transported value is passed through
  :func:`smartnav.core.codec.parse_value` to recover its primitive type.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, MutableMapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

from .codec import encode_value, parse_value
from .history import HistoryEntry

__all__ = ["HandoffPayload", "HandoffChannel"]

logger = logging.getLogger(__name__)


@dataclass
class HandoffPayload:
    """Full navigation context of a navigator: current state plus history."""

    path: str
    params: Dict[str, Any] = field(default_factory=dict)
    props: Optional[Dict[str, Any]] = None
    past: List[HistoryEntry] = field(default_factory=list)
    future: List[HistoryEntry] = field(default_factory=list)

    @property
    def current(self) -> HistoryEntry:
        return HistoryEntry.capture(self.path, self.params, self.props)


class _WireEntry(BaseModel):
    path: str
    params: Dict[str, str] = Field(default_factory=dict)
    props: Optional[Dict[str, str]] = None


class _WireHistory(BaseModel):
    past: List[_WireEntry] = Field(default_factory=list)
    future: List[_WireEntry] = Field(default_factory=list)


class _WireSlot(_WireEntry):
    created: float
    history: _WireHistory = Field(default_factory=_WireHistory)


class HandoffChannel:
    """Keyed, consume-once transfer slots in shared string storage."""

    __slots__ = ("storage", "ttl", "prefix", "_clock")

    def __init__(
        self,
        storage: Optional[MutableMapping[str, str]] = None,
        *,
        ttl: Optional[float] = 300.0,
        prefix: str = "smartnav.handoff.",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage: MutableMapping[str, str] = {} if storage is None else storage
        self.ttl = ttl
        self.prefix = prefix
        self._clock = clock

    # ------------------------------------------------------------------
    # Sending side
    # ------------------------------------------------------------------
    def begin_handoff(self, payload: HandoffPayload) -> str:
        self.purge_expired()
        handoff_id = uuid.uuid4().hex
        slot = _WireSlot(
            created=self._clock(),
            history=_WireHistory(
                past=[self._wire_entry(entry) for entry in payload.past],
                future=[self._wire_entry(entry) for entry in payload.future],
            ),
            **self._wire_entry(payload.current).model_dump(),
        )
        self.storage[self._key(handoff_id)] = slot.model_dump_json()
        logger.debug(
            "Handoff %s written for %r (past=%d, future=%d)",
            handoff_id,
            payload.path,
            len(payload.past),
            len(payload.future),
        )
        return handoff_id

    # ------------------------------------------------------------------
    # Receiving side
    # ------------------------------------------------------------------
    def consume_handoff(self, handoff_id: Optional[str]) -> Optional[HandoffPayload]:
        if not handoff_id:
            return None
        raw = self.storage.pop(self._key(handoff_id), None)
        if raw is None:
            logger.debug("Handoff %s not found (never written or already consumed)", handoff_id)
            return None
        try:
            slot = _WireSlot.model_validate_json(raw)
            if self._is_expired(slot.created):
                logger.warning("Discarding expired handoff %s", handoff_id)
                return None
            current = self._read_entry(slot)
            return HandoffPayload(
                path=current.path,
                params=current.params,
                props=current.props,
                past=[self._read_entry(entry) for entry in slot.history.past],
                future=[self._read_entry(entry) for entry in slot.history.future],
            )
        except (ValueError, RecursionError) as exc:
            logger.warning("Discarding malformed handoff %s: %s", handoff_id, exc)
            return None

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------
    def purge_expired(self) -> int:
        """Delete abandoned slots; malformed slots are deleted too."""
        removed = 0
        for key in [k for k in list(self.storage.keys()) if k.startswith(self.prefix)]:
            raw = self.storage.get(key)
            if raw is None:
                continue
            try:
                created = _WireSlot.model_validate_json(raw).created
            except (ValidationError, RecursionError):
                created = None
            if created is None or self._is_expired(created):
                self.storage.pop(key, None)
                removed += 1
        if removed:
            logger.debug("Purged %d abandoned handoff slot(s)", removed)
        return removed

    def pending(self) -> Tuple[str, ...]:
        return tuple(
            key[len(self.prefix) :] for key in list(self.storage.keys()) if key.startswith(self.prefix)
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _key(self, handoff_id: str) -> str:
        return f"{self.prefix}{handoff_id}"

    def _is_expired(self, created: float) -> bool:
        return self.ttl is not None and self._clock() - created > self.ttl

    def _wire_entry(self, entry: HistoryEntry) -> _WireEntry:
        return _WireEntry(
            path=entry.path,
            params=self._encode_values(entry.path, entry.params),
            props=None if entry.props is None else self._encode_values(entry.path, entry.props),
        )

    @staticmethod
    def _encode_values(path: str, values: Dict[str, Any]) -> Dict[str, str]:
        encoded: Dict[str, str] = {}
        for key, value in values.items():
            try:
                encoded[key] = encode_value(value)
            except (TypeError, ValueError):
                logger.warning(
                    "Dropping non-transportable value %r of %r from handoff", key, path
                )
        return encoded

    @staticmethod
    def _read_entry(entry: _WireEntry) -> HistoryEntry:
        return HistoryEntry(
            path=entry.path,
            params={key: parse_value(value) for key, value in entry.params.items()},
            props=None
            if entry.props is None
            else {key: parse_value(value) for key, value in entry.props.items()},
        )
