"""Single reload callback holder.

The callback belongs to the currently mounted page. It is overwritten on every
``set_refetch`` and is never part of history entries or handoff payloads.

``reload()``

- no callback: logged at debug level, returns ``None``.
- synchronous callback: called with ``is_reloading`` set for its duration.
- callback returning an awaitable: inside a running event loop ``reload()``
  schedules it and returns the task, which clears ``is_reloading`` once it
  settles. Without a running loop the awaitable is closed, ``is_reloading``
  is cleared and a warning points at ``use_smartasync``.
- errors raised by the callback are logged; a failed reload is not fatal.

When ``use_smartasync`` is true, coroutine functions are wrapped with
``smartasync.smartasync`` so synchronous callers can drive them directly.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Optional

from .base import RefetchCallback
from .observable import Observable

__all__ = ["RefetchCoordinator"]

logger = logging.getLogger(__name__)


class RefetchCoordinator:
    __slots__ = ("_callback", "_use_smartasync", "is_reloading")

    def __init__(self, *, use_smartasync: bool = False) -> None:
        self._callback: Optional[RefetchCallback] = None
        self._use_smartasync = bool(use_smartasync)
        self.is_reloading: Observable[bool] = Observable(False, name="is_reloading")

    def set_refetch(self, callback: Optional[RefetchCallback]) -> None:
        if callback is not None and not callable(callback):
            raise TypeError("Refetch callback must be callable or None")
        self._callback = callback

    def get_refetch(self) -> Optional[RefetchCallback]:
        return self._callback

    def clear(self) -> None:
        self._callback = None

    def reload(self) -> Optional[Awaitable[None]]:
        callback = self._callback
        if callback is None:
            logger.debug("No refetch callback registered; reload ignored")
            return None
        if self._use_smartasync and inspect.iscoroutinefunction(callback):
            from smartasync import smartasync  # type: ignore

            callback = smartasync(callback)

        self.is_reloading.set(True)
        try:
            result = callback()
        except Exception:
            logger.exception("Reload failed")
            self.is_reloading.set(False)
            return None
        if inspect.isawaitable(result):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(result):
                    result.close()
                self.is_reloading.set(False)
                logger.warning(
                    "Async refetch callback called without a running event loop; "
                    "enable use_smartasync to drive it from synchronous code"
                )
                return None
            return asyncio.ensure_future(self._settle(result))
        self.is_reloading.set(False)
        return None

    async def _settle(self, pending: Awaitable[Any]) -> None:
        try:
            await pending
        except Exception:
            logger.exception("Reload failed")
        finally:
            self.is_reloading.set(False)
