"""SmartNav public API surface.

- Public exports: ``Navigator``, ``RouteRegistry``, ``route_path``, ``page``,
  ``DeepLinkCodec``, ``HandoffChannel``, ``HandoffPayload``, ``HistoryEntry``,
  ``Observable``, ``open_navigator``.
- Built-in plugins (``logging``, ``pydantic``) are imported for their side
  effect of calling ``Navigator.register_plugin``. Imports go through
  ``import_module`` to avoid cycles.
- Importing stays lightweight: no navigator is created here; every window or
  panel constructs its own.
"""

from importlib import import_module

__version__ = "0.3.0"

from .core import (
    BaseNavigator,
    DeepLink,
    DeepLinkCodec,
    HandoffChannel,
    HandoffPayload,
    HistoryEntry,
    Navigator,
    Observable,
    ResolvedElement,
    RouteEntry,
    RouteRegistry,
    open_navigator,
    page,
    route_path,
)

for _plugin in ("logging", "pydantic"):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "BaseNavigator",
    "Navigator",
    "RouteRegistry",
    "RouteEntry",
    "ResolvedElement",
    "route_path",
    "page",
    "DeepLink",
    "DeepLinkCodec",
    "HandoffChannel",
    "HandoffPayload",
    "HistoryEntry",
    "Observable",
    "open_navigator",
]
