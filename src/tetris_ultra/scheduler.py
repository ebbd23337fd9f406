"""Cancellable repeating gravity timer running on the asyncio event loop."""

from __future__ import annotations

from typing import Callable, Optional
import asyncio
import logging


LOGGER = logging.getLogger(__name__)


class GravityScheduler:
    """Call ``callback`` every ``period_ms`` milliseconds until stopped.

    :meth:`start` always cancels the previous timer before arming a new one,
    so a changed period takes effect from the next tick instead of after the
    stale interval has run out.  The callback may itself call :meth:`start`
    or :meth:`stop`.  An exception from the callback is logged and the timer
    keeps running.
    """

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self._period_ms: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def period_ms(self) -> Optional[int]:
        return self._period_ms

    def start(self, period_ms: int) -> None:
        """(Re)arm the timer.  Must be called with an event loop running."""

        if period_ms <= 0:
            raise ValueError(f"Timer period must be positive, got {period_ms}")
        self.stop()
        loop = asyncio.get_running_loop()
        self._period_ms = period_ms
        self._task = loop.create_task(self._run(period_ms / 1000.0))
        LOGGER.debug("Gravity armed every %d ms", period_ms)

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        self._period_ms = None
        LOGGER.debug("Gravity stopped")

    async def _run(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                self._callback()
            except Exception:
                # Keep gravity alive; the next tick retries against fresh state.
                LOGGER.exception("Gravity tick failed")
