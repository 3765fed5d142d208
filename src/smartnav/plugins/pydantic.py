"""Pydantic plugin: keep route params transportable.

Only two operations write route params: ``navigate`` (the whole ``params``
mapping) and ``update_query`` (a single ``value``). Both arguments are
checked against the navigation value types of :mod:`smartnav.core.base`
before the operation runs, so a callable or an arbitrary object never lands
in ``current_params`` or in a history entry. Props are left alone.

A rejected call raises ``pydantic.ValidationError`` titled
``"Validation error in <operation>"`` and leaves the navigator untouched.
``configure(disabled=True)``, navigator-wide or with ``_target`` set to one
operation, switches the check off at runtime.
"""

from __future__ import annotations

import inspect
from typing import Callable, Dict, Optional, Tuple

try:
    from pydantic import TypeAdapter, ValidationError
except ImportError:  # pragma: no cover - import guard
    raise ImportError("Pydantic plugin requires pydantic. Install with: pip install pydantic")

from smartnav.core.base import NavigationParams, NavigationValue
from smartnav.core.navigator import Navigator
from smartnav.plugins._base_plugin import BasePlugin, OperationEntry

# operation -> (argument name, adapter)
CHECKED_ARGUMENTS: Dict[str, Tuple[str, TypeAdapter]] = {
    "navigate": ("params", TypeAdapter(Optional[NavigationParams])),
    "update_query": ("value", TypeAdapter(NavigationValue)),
}


class PydanticPlugin(BasePlugin):
    """Reject route params that are not navigation values."""

    plugin_code = "pydantic"
    plugin_description = "Validates route params written by navigate and update_query"

    def configure(self, disabled: bool = False):
        pass

    def on_register(self, navigator: "Navigator", entry: OperationEntry) -> None:
        checked = CHECKED_ARGUMENTS.get(entry.name)
        if checked is None:
            return
        argument, adapter = checked
        entry.metadata["pydantic"] = {
            "argument": argument,
            "adapter": adapter,
            "signature": inspect.signature(entry.func),
        }

    def wrap_operation(self, navigator: "Navigator", entry: OperationEntry, call_next: Callable):
        meta = entry.metadata.get("pydantic")
        if not meta:
            return call_next

        argument = meta["argument"]
        adapter: TypeAdapter = meta["adapter"]
        signature: inspect.Signature = meta["signature"]

        def checked(*args, **kwargs):
            if self.configuration(entry.name).get("disabled"):
                return call_next(*args, **kwargs)
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            try:
                bound.arguments[argument] = adapter.validate_python(bound.arguments[argument])
            except ValidationError as exc:
                raise ValidationError.from_exception_data(
                    title=f"Validation error in {entry.name}",
                    line_errors=exc.errors(),
                ) from exc
            return call_next(*bound.args, **bound.kwargs)

        return checked


Navigator.register_plugin(PydanticPlugin)
