"""Plugin-free navigation runtime (source of truth).

The module exposes :class:`BaseNavigator`, the navigation state store and
history state machine of one panel. Subclasses add middleware around the
operations but must preserve these semantics.

Constructor
-----------
::

    BaseNavigator(registry, *, current_path="", initial_params=None,
                  initial_props=None, use_smartasync=False, **options)

- ``registry`` is a :class:`RouteRegistry` or a plain ``{key: render}`` /
  ``route_path`` mapping (wrapped into a registry). ``None`` raises
  ``ValueError``.
- ``options`` are merged over the defaults with ``SmartOptions``:
  ``scheme`` (deep-link scheme, ``"smartnav"``), ``default_path`` (``""``),
  ``route_param_keys`` (``("slug", "id")``), ``handoff_param``
  (``"handoff"``).
- Instances are independent: there is no module-level navigator.

State store
-----------
Observable fields ``current_path``, ``current_params``, ``current_props`` and
``custom_name`` (``get()``/``set()``/``subscribe()``). Consumers read and
subscribe; mutation goes through the operations below.

``current_element()`` resolves ``current_path`` in the registry (``404``
fallback) and merges ``entry.props``, ``current_props`` and
``current_params`` in that order (later wins): params take precedence.

Operations
----------
Each public operation dispatches through ``_operations[name]`` so plugin
navigators can wrap it:

- ``navigate(path, params=None, props=None)``: unless ``current_path`` is
  ``""`` (bootstrap), the current state is pushed to ``past`` with its props
  taken from ``snapshot()``; ``future`` is always cleared; the new state is
  installed and ``custom_name`` reset.
- ``update_query(key, value, push=False)``: ``None`` removes ``key``. With
  ``push`` this is ``navigate(current_path, new_params, snapshot())``;
  otherwise params are replaced in place without a history entry.
- ``remove_query(key, push=False)``: ``update_query(key, None, push)``.
- ``backwards()`` / ``forwards()``: no-op on an empty side. The current state
  (raw props, no provider call) moves to the other side and the popped entry
  is installed as-is. No refetch happens.
- ``reload()``: delegates to the refetch coordinator; history untouched.
- ``set_state(state)``: merges ``state`` into ``current_props``.

The refetch callback survives ``backwards``/``forwards`` and is never invoked
by them.

Handoff
-------
``export_state()`` builds a :class:`HandoffPayload` (props from
``snapshot()``); ``detach(channel)`` writes it and returns the handoff id;
``adopt(payload)`` installs a received payload without creating entries.

Exit guard
----------
``set_can_exit(predicate)`` registers the page's "can leave?" check.
``request_exit(remember=False)`` consults it (sync result, or an awaitable
when the predicate is async). With ``remember`` an accepted request sets
``skip_next_exit_check`` so the host's native close hook does not prompt a
second time.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, Union

from smartseeds import SmartOptions
from smartseeds.typeutils import safe_is_instance

from smartnav.plugins._base_plugin import OperationEntry

from .base import (
    ExitPredicate,
    NavigationParams,
    NavigationProps,
    NavigationValue,
    RefetchCallback,
    StateProvider,
)
from .codec import DeepLinkCodec
from .handoff import HandoffChannel, HandoffPayload
from .history import HistoryEntry, HistoryStack
from .observable import Observable
from .refetch import RefetchCoordinator
from .registry import ResolvedElement, RouteRegistry
from .snapshot import StateProviderRegistry

__all__ = ["BaseNavigator", "OPERATIONS"]

logger = logging.getLogger(__name__)

OPERATIONS: Tuple[str, ...] = (
    "navigate",
    "update_query",
    "remove_query",
    "backwards",
    "forwards",
    "reload",
    "set_state",
)

_DEFAULT_OPTIONS: Dict[str, Any] = {
    "scheme": "smartnav",
    "default_path": "",
    "route_param_keys": ("slug", "id"),
    "handoff_param": "handoff",
}


class BaseNavigator:
    """Navigation state store + history state machine for one panel."""

    __slots__ = (
        "registry",
        "history",
        "providers",
        "refetch",
        "codec",
        "options",
        "current_path",
        "current_params",
        "current_props",
        "custom_name",
        "skip_next_exit_check",
        "_can_exit",
        "_entries",
        "_operations",
    )

    def __init__(
        self,
        registry: Union[RouteRegistry, Mapping[str, Any]],
        *,
        current_path: str = "",
        initial_params: Optional[NavigationParams] = None,
        initial_props: Optional[NavigationProps] = None,
        use_smartasync: bool = False,
        **options: Any,
    ) -> None:
        if registry is None:
            raise ValueError("Navigator requires a route registry")
        if not safe_is_instance(registry, "smartnav.core.registry.RouteRegistry"):
            registry = RouteRegistry(paths=registry)
        self.registry: RouteRegistry = registry
        self.options = SmartOptions(options, defaults=_DEFAULT_OPTIONS)
        self.history = HistoryStack()
        self.providers = StateProviderRegistry()
        self.refetch = RefetchCoordinator(use_smartasync=use_smartasync)
        self.codec = DeepLinkCodec(getattr(self.options, "scheme", "smartnav"))

        self.current_path: Observable[str] = Observable(current_path or "", name="current_path")
        self.current_params: Observable[NavigationParams] = Observable(
            dict(initial_params or {}), name="current_params"
        )
        self.current_props: Observable[Optional[NavigationProps]] = Observable(
            dict(initial_props) if initial_props is not None else None, name="current_props"
        )
        self.custom_name: Observable[Optional[str]] = Observable(None, name="custom_name")

        self.skip_next_exit_check = False
        self._can_exit: Optional[ExitPredicate] = None
        self._entries: Dict[str, OperationEntry] = {}
        self._operations: Dict[str, Callable] = {}
        for name in OPERATIONS:
            self._entries[name] = OperationEntry(
                name=name,
                func=getattr(self, f"_op_{name}"),
                navigator=self,
                plugins=[],
            )
        self._rebuild_operations()

    # ------------------------------------------------------------------
    # Operation table
    # ------------------------------------------------------------------
    def _wrap_operation(
        self, entry: OperationEntry, call_next: Callable
    ) -> Callable:  # pragma: no cover - overridden by plugin navigators
        return call_next

    def _rebuild_operations(self) -> None:
        self._operations = {
            name: self._wrap_operation(entry, entry.func) for name, entry in self._entries.items()
        }

    def operations(self) -> Tuple[str, ...]:
        return tuple(self._operations.keys())

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    def navigate(
        self,
        path: str,
        params: Optional[NavigationParams] = None,
        props: Optional[NavigationProps] = None,
    ) -> None:
        self._operations["navigate"](path, params, props)

    def update_query(self, key: str, value: NavigationValue = None, push: bool = False) -> None:
        self._operations["update_query"](key, value, push)

    def remove_query(self, key: str, push: bool = False) -> None:
        self._operations["remove_query"](key, push)

    def backwards(self) -> None:
        self._operations["backwards"]()

    def forwards(self) -> None:
        self._operations["forwards"]()

    def reload(self) -> Optional[Awaitable[None]]:
        return self._operations["reload"]()

    def set_state(self, state: Optional[NavigationProps] = None, **kwargs: Any) -> None:
        self._operations["set_state"]({**(state or {}), **kwargs})

    # ------------------------------------------------------------------
    # Operation implementations
    # ------------------------------------------------------------------
    def _op_navigate(
        self,
        path: str,
        params: Optional[NavigationParams] = None,
        props: Optional[NavigationProps] = None,
    ) -> None:
        self._push(HistoryEntry.capture(path, params, props))
        self.history.clear_future()
        logger.debug("Navigated to %r params=%r", path, params or {})

    def _op_update_query(
        self, key: str, value: NavigationValue = None, push: bool = False
    ) -> None:
        new_params = dict(self.current_params.get())
        if value is None:
            new_params.pop(key, None)
        else:
            new_params[key] = value
        if push:
            self._op_navigate(self.current_path.get(), new_params, self.snapshot())
        else:
            self.current_params.set(new_params)

    def _op_remove_query(self, key: str, push: bool = False) -> None:
        self._op_update_query(key, None, push)

    def _op_backwards(self) -> None:
        previous = self.history.back(self._current_entry())
        if previous is not None:
            self._apply(previous)

    def _op_forwards(self) -> None:
        following = self.history.forward(self._current_entry())
        if following is not None:
            self._apply(following)

    def _op_reload(self) -> Optional[Awaitable[None]]:
        return self.refetch.reload()

    def _op_set_state(self, state: NavigationProps) -> None:
        self.current_props.set({**(self.current_props.get() or {}), **state})

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------
    def _current_entry(self, *, live: bool = False) -> HistoryEntry:
        props = self.snapshot() if live else self.current_props.get()
        return HistoryEntry.capture(self.current_path.get(), self.current_params.get(), props)

    def _push(self, target: HistoryEntry) -> None:
        if self.current_path.get() != "":
            self.history.push(self._current_entry(live=True))
        self._apply(target)
        self.custom_name.set(None)

    def _apply(self, entry: HistoryEntry) -> None:
        fresh = HistoryEntry.capture(entry.path, entry.params, entry.props)
        # path last: its subscribers read params/props of the new route
        self.current_params.set(fresh.params)
        self.current_props.set(fresh.props)
        self.current_path.set(fresh.path)

    def can_go_back(self) -> bool:
        return self.history.can_go_back()

    def can_go_forward(self) -> bool:
        return self.history.can_go_forward()

    def clear_history(self) -> None:
        self.history.clear()

    def current_element(self) -> ResolvedElement:
        path = self.current_path.get()
        entry = self.registry.resolve(path)
        props: Dict[str, Any] = dict(entry.props)
        props.update(self.current_props.get() or {})
        props.update(self.current_params.get())
        return ResolvedElement(path=path, entry=entry, props=props)

    def display_name(self) -> Optional[str]:
        return self.custom_name.get() or self.current_element().name

    def render_view(self, **extra: Any) -> Any:
        """Call the active render unit with its merged props plus ``extra``."""
        element = self.current_element()
        return element.render(**{**element.props, **extra})

    def generate_url(self) -> str:
        return self.codec.encode(self.current_path.get(), self.current_params.get())

    # ------------------------------------------------------------------
    # Snapshots and refetch
    # ------------------------------------------------------------------
    def register_state_provider(self, path: str, provider: StateProvider) -> None:
        self.providers.register(path, provider)

    def unregister_state_provider(self, path: str, provider: Optional[StateProvider] = None) -> None:
        self.providers.unregister(path, provider)

    def snapshot(self) -> Optional[NavigationProps]:
        return self.providers.snapshot(self.current_path.get(), self.current_props.get())

    def set_refetch(self, callback: Optional[RefetchCallback]) -> None:
        self.refetch.set_refetch(callback)

    def get_refetch(self) -> Optional[RefetchCallback]:
        return self.refetch.get_refetch()

    @property
    def is_reloading(self) -> Observable[bool]:
        return self.refetch.is_reloading

    # ------------------------------------------------------------------
    # Handoff
    # ------------------------------------------------------------------
    def export_state(self) -> HandoffPayload:
        current = self._current_entry(live=True)
        return HandoffPayload(
            path=current.path,
            params=current.params,
            props=current.props,
            past=self.history.past,
            future=self.history.future,
        )

    def detach(self, channel: HandoffChannel) -> str:
        """Write the full navigation context to ``channel`` and return its id."""
        return channel.begin_handoff(self.export_state())

    def adopt(self, payload: HandoffPayload) -> None:
        """Install a received navigation context without recording history."""
        if not safe_is_instance(payload, "smartnav.core.handoff.HandoffPayload"):
            raise TypeError("adopt() requires a HandoffPayload")
        self.history.replace(payload.past, payload.future)
        self._apply(payload.current)
        self.custom_name.set(None)
        logger.debug(
            "Adopted %r (past=%d, future=%d)",
            payload.path,
            len(payload.past),
            len(payload.future),
        )

    # ------------------------------------------------------------------
    # Exit guard
    # ------------------------------------------------------------------
    def set_can_exit(self, predicate: Optional[ExitPredicate]) -> None:
        if predicate is not None and not callable(predicate):
            raise TypeError("Exit predicate must be callable or None")
        self._can_exit = predicate

    def get_can_exit(self) -> Optional[ExitPredicate]:
        return self._can_exit

    def request_exit(self, *, remember: bool = False) -> Union[bool, Awaitable[bool]]:
        if self.skip_next_exit_check:
            self.skip_next_exit_check = False
            return True
        predicate = self._can_exit
        if predicate is None:
            return True
        verdict = predicate()
        if inspect.isawaitable(verdict):
            return self._settle_exit(verdict, remember)
        return self._record_exit(bool(verdict), remember)

    async def _settle_exit(self, pending: Awaitable[Any], remember: bool) -> bool:
        return self._record_exit(bool(await pending), remember)

    def _record_exit(self, allowed: bool, remember: bool) -> bool:
        if allowed and remember:
            self.skip_next_exit_check = True
        return allowed

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={self.current_path.get()!r}, "
            f"past={len(self.history.past)}, future={len(self.history.future)})"
        )
