"""Logging plugin (source of truth).

Responsibilities
----------------
- Wrap each navigator operation and emit configurable messages:
  * ``before`` (default True): ``"<operation> start at <path>"``
  * ``after`` (default True): ``"<operation> end at <path> (<ms> ms)"`` with the
    path active once the operation finished and ``{elapsed:.2f}`` formatting.
- Sinks:
  * ``print`` true -> ``print(message)``;
  * else ``log`` true -> ``logger.info(message)`` when the logger reports
    handlers via ``hasHandlers()``, otherwise ``print(message)`` so messages
    are not dropped;
  * else no output.
- ``enabled`` gates the plugin entirely (default True).
- Logger defaults to ``logging.getLogger("smartnav")``.

Configuration
-------------
Keys ``enabled``, ``before``, ``after``, ``log``, ``print`` can be given to
``plug("logging", ...)``, as ``flags="before:off,print:on"``, or per
operation with ``navigator.logging.configure(_target="navigate", after=False)``.

Exceptions raised by an operation propagate; the end message is skipped.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from smartnav.core.navigator import Navigator
from smartnav.plugins._base_plugin import BasePlugin, OperationEntry


class LoggingPlugin(BasePlugin):
    """Logs navigator operations with timing."""

    plugin_code = "logging"
    plugin_description = "Logs navigator operations with timing"

    __slots__ = ("_logger",)

    def __init__(self, navigator, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("smartnav")
        super().__init__(navigator, **cfg)

    def configure(
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging plugin options (storage handled by the wrapper)."""
        pass

    def _emit(self, message: str, *, cfg: Optional[dict] = None):
        if cfg is None:
            return
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            logger = self._logger
            has_handlers = getattr(logger, "hasHandlers", None) or getattr(
                logger, "has_handlers", None
            )
            if callable(has_handlers) and has_handlers():
                logger.info(message)
            else:
                print(message)

    def wrap_operation(self, navigator, entry: OperationEntry, call_next: Callable):
        """Wrap an operation with start/end logging and timing."""

        def logged(*args, **kwargs):
            cfg = self._effective_config(entry.name)
            if not cfg["enabled"]:
                return call_next(*args, **kwargs)
            if cfg["before"]:
                self._emit(
                    f"{entry.name} start at {navigator.current_path.get() or '<empty>'}", cfg=cfg
                )
            t0 = time.perf_counter()
            result = call_next(*args, **kwargs)
            elapsed = (time.perf_counter() - t0) * 1000
            if cfg["after"]:
                self._emit(
                    f"{entry.name} end at {navigator.current_path.get() or '<empty>'} "
                    f"({elapsed:.2f} ms)",
                    cfg=cfg,
                )
            return result

        return logged

    def _effective_config(self, operation: str) -> dict:
        defaults = {"enabled": True, "before": True, "after": True, "log": True, "print": False}
        cfg = defaults | self.configuration(operation)

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


Navigator.register_plugin(LoggingPlugin)
