"""Quiescence-window debouncing for free-text filter inputs."""

import asyncio
import logging
from typing import Awaitable, Callable, Generic, TypeVar

from app.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Deliver only the last pushed value, once input has been quiet for ``delay_ms``.

    Each ``push`` restarts the window.  Must be used from a running event loop.
    """

    def __init__(
        self,
        callback: Callable[[T], Awaitable[None] | None],
        delay_ms: int | None = None,
    ):
        self._callback = callback
        self.delay_ms = settings.filter_debounce_ms if delay_ms is None else delay_ms
        self._task: asyncio.Task | None = None
        self._pending: tuple[T] | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def push(self, value: T) -> None:
        self._pending = (value,)
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fire_later())
        self._task.add_done_callback(self._report_failure)

    @staticmethod
    def _report_failure(task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is None:
            return
        logger.error("Debounced callback failed", exc_info=task.exception())

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay_ms / 1000)
        await self._deliver()

    async def _deliver(self) -> None:
        if self._pending is None:
            return
        (value,) = self._pending
        self._pending = None
        result = self._callback(value)
        if asyncio.iscoroutine(result):
            await result

    async def flush(self) -> None:
        """Deliver a pending value immediately instead of waiting out the window."""
        self.cancel_timer()
        await self._deliver()

    def cancel_timer(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def cancel(self) -> None:
        """Drop the pending value without delivering it."""
        self.cancel_timer()
        if self._pending is not None:
            logger.debug("Discarding debounced value")
        self._pending = None
