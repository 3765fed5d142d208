"""Per-route providers of live, non-serialized page state."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .base import StateProvider

__all__ = ["StateProviderRegistry"]


class StateProviderRegistry:
    """One provider per route key; the last registration wins.

    ``snapshot(path, props)`` merges the provider output over ``props`` at call
    time. Nothing is cached: every snapshot reflects the live page state.
    Provider errors propagate so a snapshot is never silently partial.
    """

    __slots__ = ("_providers",)

    def __init__(self) -> None:
        self._providers: Dict[str, StateProvider] = {}

    def register(self, path: str, provider: StateProvider) -> None:
        if not callable(provider):
            raise TypeError(f"State provider for {path!r} must be callable")
        self._providers[path] = provider

    def unregister(self, path: str, provider: Optional[StateProvider] = None) -> None:
        """Remove the provider for ``path``.

        When ``provider`` is given it is removed only if still current, so an
        unmounting page cannot drop the provider of its replacement.
        """
        current = self._providers.get(path)
        if current is None:
            return
        if provider is not None and current is not provider:
            return
        del self._providers[path]

    def get(self, path: str) -> Optional[StateProvider]:
        return self._providers.get(path)

    def snapshot(
        self, path: str, props: Optional[Mapping[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        provider = self._providers.get(path)
        if provider is None:
            return dict(props) if props is not None else None
        live = provider() or {}
        return {**(props or {}), **live}

    def __contains__(self, path: object) -> bool:
        return path in self._providers
