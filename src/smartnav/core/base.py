"""Value types shared by the navigation runtime.

Navigation params are URL-visible and restricted to a closed set of
transportable variants; props carry arbitrary payloads that never reach a URL.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

__all__ = [
    "NOT_FOUND",
    "NavigationValue",
    "NavigationParams",
    "NavigationProps",
    "StateProvider",
    "RefetchCallback",
    "ExitPredicate",
]

NOT_FOUND = "404"

NavigationValue = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
NavigationParams = Dict[str, NavigationValue]
NavigationProps = Dict[str, Any]

StateProvider = Callable[[], Dict[str, Any]]
RefetchCallback = Callable[[], Optional[Awaitable[None]]]
ExitPredicate = Callable[[], Union[bool, Awaitable[bool]]]
