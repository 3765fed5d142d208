"""Core runtime aggregator.

Exposes the navigation building blocks from a single module. Importing it
performs only imports: no plugin registration, no navigator instantiation.

- ``registry`` -> ``RouteRegistry``, ``RouteEntry``, ``ResolvedElement``
- ``decorators`` -> ``page``, ``route_path``
- ``base_navigator`` -> ``BaseNavigator`` (plugin-free engine)
- ``navigator`` -> ``Navigator`` (plugin-enabled)
- ``codec`` -> ``DeepLinkCodec``, ``DeepLink``, ``encode_value``, ``parse_value``
- ``handoff`` -> ``HandoffChannel``, ``HandoffPayload``
- ``window`` -> ``open_navigator``
"""

from .base_navigator import BaseNavigator
from .codec import DeepLink, DeepLinkCodec, encode_value, parse_value
from .decorators import page, route_path
from .handoff import HandoffChannel, HandoffPayload
from .history import HistoryEntry, HistoryStack
from .navigator import Navigator
from .observable import Observable
from .registry import ResolvedElement, RouteEntry, RouteRegistry
from .window import open_navigator

__all__ = [
    "BaseNavigator",
    "Navigator",
    "RouteRegistry",
    "RouteEntry",
    "ResolvedElement",
    "page",
    "route_path",
    "DeepLink",
    "DeepLinkCodec",
    "encode_value",
    "parse_value",
    "HandoffChannel",
    "HandoffPayload",
    "HistoryEntry",
    "HistoryStack",
    "Observable",
    "open_navigator",
]
