# app/services/timer_refresher.py
"""
Periodic refresher for the table timers.

Runs as a single asyncio task on the service event loop, so a tick and a
request handler never touch the store at the same time.
Lifecycle: start() on application startup, stop() on shutdown. Once stopped
the refresher is disposed and never mutates the store again.
"""

import asyncio
from typing import Optional

from app.services.table_timer import TimerStore
from app.utils.logger import get_logger

logger = get_logger(__name__)


class TimerRefresher:
    def __init__(self, store: TimerStore, interval_seconds: float = 60):
        self.store = store
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._disposed = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def start(self):
        if self._disposed:
            raise RuntimeError("TimerRefresher was stopped and cannot be restarted")
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="timer-refresher")
        logger.info(f"⏱  Timer refresher started (every {self.interval_seconds}s)")

    async def stop(self):
        self._disposed = True
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("⏱  Timer refresher stopped")

    def tick(self) -> int:
        """Run one refresh. No-op after stop()."""
        if self._disposed:
            return 0
        return self.store.refresh()

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                changed = self.tick()
                if changed:
                    logger.debug(f"Timer tick: {changed} status change(s)")
            except Exception as e:
                logger.error(f"Timer tick failed: {e}", exc_info=True)
