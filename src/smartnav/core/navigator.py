"""Navigator with plugin pipeline (source of truth).

``Navigator`` extends ``BaseNavigator`` with a global plugin registry,
per-navigator plugin instances, middleware wrapping of the operations and
plugin configuration stored on the navigator instance.

Internal state
--------------
- ``_plugins``: instantiated plugins in the order they were plugged.
- ``_plugins_by_name``: name -> plugin instance.
- ``_plugin_info``: per-plugin store, one ``"--base--"`` bucket for
  navigator-level values plus one bucket per operation name, each holding
  ``config`` and ``locals``.

Global registry
---------------
``Navigator.register_plugin(plugin_class, name=None)`` requires a
``BasePlugin`` subclass with a ``plugin_code``. Registering a different class
under an existing code raises ``ValueError`` unless ``name`` is given
explicitly. ``available_plugins()`` returns a copy of the registry.

Plugging
--------
``plug(name, **config)`` instantiates a registered plugin, runs its
``on_register`` hook for every operation, rebuilds the operation table and
returns ``self``. Unknown names raise ``ValueError`` listing the available
plugins; plugging the same name twice raises ``ValueError``. Plugged
plugins are reachable as attributes (``navigator.logging``).

Wrapping pipeline
-----------------
The first plugged plugin is the outermost layer. Each layer checks
``is_plugin_enabled(operation, plugin)`` at call time and is bypassed when
disabled.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Type

from smartnav.core.base_navigator import BaseNavigator
from smartnav.plugins._base_plugin import BASE_TARGET, BasePlugin, OperationEntry, new_bucket

__all__ = ["Navigator"]

_PLUGIN_REGISTRY: Dict[str, Type[BasePlugin]] = {}


class Navigator(BaseNavigator):
    """Navigator with plugin registry/pipeline support."""

    __slots__ = BaseNavigator.__slots__ + (
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(self, *args, **kwargs):
        self._plugins: List[BasePlugin] = []
        self._plugins_by_name: Dict[str, BasePlugin] = {}
        self._plugin_info: Dict[str, Dict[str, Any]] = {}
        super().__init__(*args, **kwargs)

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin], name: Optional[str] = None) -> None:
        """Register a plugin class globally.

        Args:
            plugin_class: A BasePlugin subclass with plugin_code defined.
            name: Optional override name; overwrites any existing registration.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(f"Plugin {plugin_class.__name__} is missing plugin_code")
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> Dict[str, Type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> "Navigator":
        """Attach a plugin by name (previously registered globally)."""
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin_class.plugin_code in self._plugins_by_name:
            raise ValueError(f"Plugin '{plugin}' already plugged")
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        for entry in self._entries.values():
            if instance.name not in entry.plugins:
                entry.plugins.append(instance.name)
            instance.on_register(self, entry)
        self._rebuild_operations()
        return self

    def iter_plugins(self) -> List[BasePlugin]:
        return list(self._plugins)

    def get_config(self, plugin_name: str, operation: Optional[str] = None) -> Dict[str, Any]:
        """Return plugin config (global + per-operation overrides)."""
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' plugged into navigator")
        return plugin.configuration(operation)

    def __getattr__(self, name: str) -> Any:
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' plugged into navigator")
        return plugin

    def _get_plugin_bucket(self, plugin_name: str) -> Dict[str, Any]:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(f"No plugin named '{plugin_name}' plugged into navigator")
        bucket.setdefault(BASE_TARGET, new_bucket())
        return bucket

    # ------------------------------------------------------------------
    # Runtime toggles (stored on plugin_info)
    # ------------------------------------------------------------------
    def set_plugin_enabled(self, operation: str, plugin_name: str, enabled: bool = True) -> None:
        bucket = self._get_plugin_bucket(plugin_name)
        entry = bucket.setdefault(operation, new_bucket())
        entry.setdefault("locals", {})["enabled"] = bool(enabled)

    def is_plugin_enabled(self, operation: str, plugin_name: str) -> bool:
        bucket = self._get_plugin_bucket(plugin_name)
        entry_locals = bucket.get(operation, {}).get("locals", {})
        if "enabled" in entry_locals:
            return bool(entry_locals["enabled"])
        base_locals = bucket[BASE_TARGET].get("locals", {})
        return bool(base_locals.get("enabled", True))

    # ------------------------------------------------------------------
    # Overrides/hooks
    # ------------------------------------------------------------------
    def _wrap_operation(self, entry: OperationEntry, call_next: Callable) -> Callable:  # type: ignore[override]
        wrapped = call_next
        for plugin in reversed(self._plugins):
            plugin_call = plugin.wrap_operation(self, entry, wrapped)
            wrapped = self._create_wrapper(plugin, entry, plugin_call, wrapped)
        return wrapped

    def _create_wrapper(
        self,
        plugin: BasePlugin,
        entry: OperationEntry,
        plugin_call: Callable,
        next_operation: Callable,
    ) -> Callable:
        @wraps(next_operation)
        def wrapper(*args, **kwargs):
            if not self.is_plugin_enabled(entry.name, plugin.name):
                return next_operation(*args, **kwargs)
            return plugin_call(*args, **kwargs)

        return wrapper
