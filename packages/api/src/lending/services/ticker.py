# This project was developed with assistance from AI tools.
"""Periodic driver for the lifecycle tick.

Runs ``coordinator.tick()`` once on start and then every interval as a
background asyncio task. A failing tick is logged and the loop keeps going.
"""

import asyncio
import logging

from .lifecycle import LifecycleCoordinator

logger = logging.getLogger(__name__)


class ReminderTicker:
    def __init__(self, coordinator: LifecycleCoordinator, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._coordinator = coordinator
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            logger.info("Reminder ticker already running")
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Reminder ticker started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Reminder ticker stopped")

    async def run_once(self) -> None:
        try:
            result = await self._coordinator.tick()
        except Exception:
            logger.exception("Lifecycle tick failed")
            return
        logger.info(
            "Tick: %d loan status change(s), %d reminder(s) processed (%d sent, %d failed)",
            result.loans_updated,
            result.reminders.processed,
            result.reminders.sent,
            result.reminders.failed,
        )

    async def _loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self._interval)


_ticker: ReminderTicker | None = None


def set_ticker(ticker: ReminderTicker | None) -> None:
    global _ticker
    _ticker = ticker


def get_ticker() -> ReminderTicker | None:
    """Ticker started by the app lifespan, if any."""
    return _ticker
