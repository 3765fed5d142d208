"""Navigator bootstrap for a freshly opened (detached) window.

``open_navigator(registry, startup=None, *, channel=None, navigator_class=None, **options)``

Resolves the initial navigation context from, in order:

1. a handoff id found under ``handoff_param`` in ``startup``, consumed from
   ``channel``; the payload installs path, params, props and both history
   stacks;
2. the startup query itself, decoded with the navigator's codec: ``path``
   selects the route, keys listed in ``route_param_keys`` become params and
   every other key becomes a prop;
3. ``default_path`` (registry default props apply through
   ``current_element()``).

``startup`` may be a query string (``"path=/config&slug=abc"``) or a mapping
of already split startup parameters. A missing, consumed or malformed handoff
silently falls through to the next source.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Type, Union
from urllib.parse import parse_qsl

from .base_navigator import BaseNavigator
from .handoff import HandoffChannel
from .navigator import Navigator
from .registry import RouteRegistry

__all__ = ["open_navigator"]

logger = logging.getLogger(__name__)


def open_navigator(
    registry: Union[RouteRegistry, Mapping[str, Any]],
    startup: Union[str, Mapping[str, Any], None] = None,
    *,
    channel: Optional[HandoffChannel] = None,
    navigator_class: Optional[Type[BaseNavigator]] = None,
    **options: Any,
) -> BaseNavigator:
    cls = navigator_class or Navigator
    navigator = cls(registry, **options)
    startup_params = _split_startup(startup)

    handoff_param = getattr(navigator.options, "handoff_param", "handoff")
    handoff_id = startup_params.pop(handoff_param, None)
    if handoff_id and channel is not None:
        payload = channel.consume_handoff(str(handoff_id))
        if payload is not None:
            navigator.adopt(payload)
            return navigator
        logger.warning("Handoff %s unavailable, falling back to startup parameters", handoff_id)

    link = navigator.codec.decode_query(startup_params)
    if link.path:
        route_keys = set(getattr(navigator.options, "route_param_keys", ()) or ())
        params = {key: value for key, value in link.params.items() if key in route_keys}
        props = {key: value for key, value in link.params.items() if key not in route_keys}
        # navigating from the empty bootstrap path records no back-target
        navigator.navigate(link.path, params, props or None)
        return navigator

    default_path = getattr(navigator.options, "default_path", "") or ""
    if default_path:
        navigator.navigate(default_path)
    return navigator


def _split_startup(startup: Union[str, Mapping[str, Any], None]) -> Dict[str, Any]:
    """Raw startup values; typing happens in the codec, after the handoff id is taken."""
    if startup is None:
        return {}
    if isinstance(startup, str):
        return dict(parse_qsl(startup.lstrip("?"), keep_blank_values=True))
    return {str(key): value for key, value in startup.items()}
