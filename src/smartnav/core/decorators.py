"""Helpers for declaring routes.

``page(key, *, name=None, **props)``

- Returns a decorator storing a marker on the render unit under
  ``TARGET_ATTR_NAME`` as a list of dicts ``{"key", "name", "props"}``.
  Existing markers are preserved so one unit can serve several keys.
- The decorated object is returned unchanged aside from the marker; nothing
  is registered until ``RouteRegistry.add_marked`` is called.

``route_path(key, render, name=None, props=None)``

- Builds a one-item ``{key: RouteEntry}`` mapping so route tables can be
  assembled with dict unpacking::

      paths = {
          **route_path("/config", SettingsPage, "Settings"),
          **route_path("/install", InstallPage, "Install"),
      }
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from .registry import RouteEntry

__all__ = ["page", "route_path", "iter_page_markers", "TARGET_ATTR_NAME"]

TARGET_ATTR_NAME = "__smartnav_pages__"


def page(key: str, *, name: Optional[str] = None, **props: Any) -> Callable:
    """Mark a render unit for registration under ``key``.

    Args:
        key: Route key (e.g. ``"/resources"``).
        name: Optional display name.
        props: Default props merged under the live params/props.
    """

    def decorator(unit: Callable) -> Callable:
        markers = list(getattr(unit, TARGET_ATTR_NAME, []))
        markers.append({"key": key, "name": name, "props": dict(props)})
        setattr(unit, TARGET_ATTR_NAME, markers)
        return unit

    return decorator


def iter_page_markers(unit: Any) -> Iterator[Dict[str, Any]]:
    for marker in getattr(unit, TARGET_ATTR_NAME, None) or ():
        yield dict(marker)


def route_path(
    key: str,
    render: Callable[..., Any],
    name: Optional[str] = None,
    props: Optional[Mapping[str, Any]] = None,
) -> Dict[str, RouteEntry]:
    return {key: RouteEntry(key=key, render=render, name=name, props=dict(props or {}))}
