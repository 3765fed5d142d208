"""Plugin contract for navigator operations.

Every public navigator operation (``navigate``, ``update_query``,
``backwards`` ...) is described by an :class:`OperationEntry`. A plugin sees
each entry once when it is plugged (``on_register``) and then returns the
middleware layer that runs around the operation (``wrap_operation``).

Plugin options are not kept on the plugin object. They live in the owning
navigator's ``_plugin_info`` store, one bucket per target::

    _plugin_info[plugin_code] = {
        "--base--": {"config": {...}, "locals": {...}},   # whole navigator
        "navigate": {"config": {...}, "locals": {...}},   # one operation
    }

``config`` holds what ``configure()`` accepted; ``locals`` holds runtime
toggles written by ``Navigator.set_plugin_enabled``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from pydantic import validate_call

__all__ = ["BASE_TARGET", "BasePlugin", "OperationEntry", "new_bucket", "parse_flags"]

BASE_TARGET = "--base--"


@dataclass
class OperationEntry:
    """One navigator operation as seen by plugins.

    ``func`` is the bound ``_op_<name>`` implementation at the end of the
    chain; ``plugins`` lists plugged plugin codes in wrapping order and
    ``metadata`` is free space for ``on_register`` hooks.
    """

    name: str
    func: Callable
    navigator: Any
    plugins: List[str]
    metadata: Dict[str, Any] = field(default_factory=dict)


def new_bucket(**config: Any) -> Dict[str, Dict[str, Any]]:
    return {"config": dict(config), "locals": {}}


def parse_flags(flags: str) -> Dict[str, bool]:
    """Turn ``"before:off,print"`` into ``{"before": False, "print": True}``."""
    parsed: Dict[str, bool] = {}
    for chunk in (part.strip() for part in flags.split(",")):
        if not chunk:
            continue
        name, _, state = chunk.partition(":")
        parsed[name.strip()] = state.strip().lower() != "off"
    return parsed


def _targets(target: str) -> Iterator[str]:
    # "navigate,update_query" addresses several operation buckets at once
    for name in target.split(","):
        name = name.strip()
        if name:
            yield name


def _storing_configure(declared: Callable) -> Callable:
    """Validate ``declared``'s keywords, then store them on the navigator."""
    check = validate_call(declared)

    def configure(
        self: "BasePlugin", *, _target: str = BASE_TARGET, flags: Optional[str] = None, **options: Any
    ) -> None:
        if flags:
            options.update(parse_flags(flags))
        check(self, **options)
        for target in _targets(_target):
            self._write_config(target, options)

    configure.__doc__ = declared.__doc__
    return configure


class BasePlugin:
    """Base class of navigator plugins.

    Subclasses set ``plugin_code`` and ``plugin_description`` and declare
    their options as the keyword parameters of ``configure``; the body of
    ``configure`` is never responsible for storing anything.
    """

    __slots__ = ("name", "_navigator")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        declared = cls.__dict__.get("configure")
        if declared is not None:
            cls.configure = _storing_configure(declared)

    def __init__(self, navigator: Any, **config: Any):
        self.name = self.plugin_code
        self._navigator = navigator
        self._buckets().setdefault(BASE_TARGET, new_bucket(enabled=True))
        self.configure(**config)

    def configure(self, *, _target: str = BASE_TARGET, flags: Optional[str] = None) -> None:
        if flags:
            for target in _targets(_target):
                self._write_config(target, parse_flags(flags))

    def configuration(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """Navigator-level options overridden by the ``operation`` bucket."""
        buckets = self._buckets()
        merged = dict(buckets.get(BASE_TARGET, {}).get("config", {}))
        if operation:
            merged.update(buckets.get(operation, {}).get("config", {}))
        return merged

    def on_register(self, navigator: Any, entry: OperationEntry) -> None:
        pass

    def wrap_operation(self, navigator: Any, entry: OperationEntry, call_next: Callable) -> Callable:
        return call_next

    def _write_config(self, target: str, options: Dict[str, Any]) -> None:
        if options:
            self._buckets().setdefault(target, new_bucket())["config"].update(options)

    def _buckets(self) -> Dict[str, Any]:
        return self._navigator._plugin_info.setdefault(self.name, {})
