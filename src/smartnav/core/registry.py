"""Route registry (source of truth).

The module exposes :class:`RouteRegistry`, a static mapping from flat route
keys to renderable units, plus the :class:`RouteEntry` and
:class:`ResolvedElement` value types.

Constructor
-----------
``RouteRegistry(paths=None, invalid=None)``

- ``paths``: optional mapping ``key -> RouteEntry`` (as produced by
  :func:`smartnav.core.decorators.route_path`) or ``key -> render`` callables.
- ``invalid``: render unit used for the reserved ``"404"`` key. When omitted a
  render unit returning ``None`` is installed. The ``404`` entry always exists.

Registration
------------
``register(key, render, name=None, props=None, *, replace=False)``

- ``key`` must be a non-empty string; ``render`` must be callable.
- Re-registering an existing key raises ``ValueError`` unless ``replace`` is
  true. ``"404"`` is the exception: registering it always replaces the
  fallback.
- ``props`` are shallow-copied into the entry; entries are frozen.

``add_marked(*units)`` registers render units carrying ``@page`` markers.

Resolution
----------
``resolve(key)`` returns the entry for ``key`` or the ``404`` entry. It never
raises; the fallback is observable through ``entry.key == "404"``.

Invariants
----------
- Keys are matched verbatim: no wildcard or segment matching.
- Entries are never mutated after registration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from .base import NOT_FOUND

__all__ = ["RouteEntry", "ResolvedElement", "RouteRegistry"]

logger = logging.getLogger(__name__)


def _render_nothing(**_: Any) -> None:
    return None


@dataclass(frozen=True)
class RouteEntry:
    """A registered view: render unit, display name and default props."""

    key: str
    render: Callable[..., Any]
    name: Optional[str] = None
    props: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedElement:
    """The active route's entry together with its merged props."""

    path: str
    entry: RouteEntry
    props: Dict[str, Any]

    @property
    def key(self) -> str:
        return self.entry.key

    @property
    def name(self) -> Optional[str]:
        return self.entry.name

    @property
    def render(self) -> Callable[..., Any]:
        return self.entry.render

    @property
    def is_fallback(self) -> bool:
        return self.entry.key == NOT_FOUND and self.path != NOT_FOUND


class RouteRegistry:
    """Flat route key -> RouteEntry mapping with a ``404`` fallback."""

    __slots__ = ("_entries",)

    def __init__(
        self,
        paths: Optional[Mapping[str, Any]] = None,
        invalid: Optional[Callable[..., Any]] = None,
    ) -> None:
        self._entries: Dict[str, RouteEntry] = {}
        self.register(NOT_FOUND, invalid or _render_nothing)
        for key, value in (paths or {}).items():
            if isinstance(value, RouteEntry):
                self.register(key, value.render, value.name, value.props)
            else:
                self.register(key, value)

    def register(
        self,
        key: str,
        render: Callable[..., Any],
        name: Optional[str] = None,
        props: Optional[Mapping[str, Any]] = None,
        *,
        replace: bool = False,
    ) -> RouteEntry:
        """Register ``render`` under ``key`` and return the new entry.

        Raises:
            ValueError: empty key, or key collision when ``replace`` is False.
            TypeError: ``render`` is not callable.
        """
        if not isinstance(key, str) or not key:
            raise ValueError(f"Route key must be a non-empty string, got {key!r}")
        if not callable(render):
            raise TypeError(f"Route {key!r} requires a callable render unit")
        if key in self._entries and not replace and key != NOT_FOUND:
            raise ValueError(f"Route key collision: {key}")
        entry = RouteEntry(key=key, render=render, name=name, props=dict(props or {}))
        self._entries[key] = entry
        return entry

    def add_marked(self, *units: Any, replace: bool = False) -> "RouteRegistry":
        """Register every render unit decorated with ``@page``."""
        from .decorators import iter_page_markers

        for unit in units:
            for marker in iter_page_markers(unit):
                self.register(
                    marker["key"],
                    unit,
                    marker.get("name"),
                    marker.get("props"),
                    replace=replace,
                )
        return self

    def resolve(self, key: str) -> RouteEntry:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Unknown route %r, falling back to %s", key, NOT_FOUND)
            return self._entries[NOT_FOUND]
        return entry

    def get(self, key: str) -> Optional[RouteEntry]:
        return self._entries.get(key)

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._entries.keys())

    def members(self) -> Dict[str, Dict[str, Any]]:
        """Describe registered routes for tooling (the fallback included)."""
        return {
            key: {"name": entry.name, "render": entry.render, "props": dict(entry.props)}
            for key, entry in self._entries.items()
        }

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
