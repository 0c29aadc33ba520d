# app/services/table_timer.py
"""
Table occupancy timers with a traffic-light status.

A timer is created when a table is seated, recomputed on every refresher
tick while active, and removed explicitly by the caller.
Status: green < 75% of the booked duration ≤ yellow < 100% ≤ red.
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


class TimerStatus(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


@dataclass
class TableTimer:
    id: str
    start_time: datetime
    duration: int               # minutes
    is_active: bool = True
    elapsed_minutes: int = 0
    status: TimerStatus = TimerStatus.GREEN


def classify(elapsed_minutes: float, duration: float) -> TimerStatus:
    # A zero-length booking is overdue as soon as it starts
    if duration <= 0:
        return TimerStatus.RED
    ratio = elapsed_minutes / duration
    if ratio >= settings.TIMER_RED_RATIO:
        return TimerStatus.RED
    if ratio >= settings.TIMER_YELLOW_RATIO:
        return TimerStatus.YELLOW
    return TimerStatus.GREEN


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def elapsed_minutes_since(start_time: datetime, now: datetime) -> int:
    """Whole minutes between start and now, never negative."""
    return max(0, math.floor((now - start_time).total_seconds() / 60))


class TimerStore:
    """
    In-memory timers keyed by table id.
    All mutations are synchronous; reads return copies so callers never
    hold a reference the refresher will change underneath them.
    """

    def __init__(self, default_duration: int = 120, clock: Callable[[], datetime] = _utcnow):
        self.default_duration = default_duration
        self._clock = clock
        self._timers: dict[str, TableTimer] = {}

    def start_timer(self, table_id: str, duration_minutes: Optional[int] = None) -> TableTimer:
        duration = self.default_duration if duration_minutes is None else duration_minutes
        timer = TableTimer(id=table_id, start_time=self._clock(), duration=duration,
                           status=classify(0, duration))
        self._timers[table_id] = timer
        logger.info(f"[TIMER] {table_id} started ({duration} min)")
        return replace(timer)

    def stop_timer(self, table_id: str) -> None:
        timer = self._timers.get(table_id)
        if timer is None:
            return
        timer.is_active = False
        logger.info(f"[TIMER] {table_id} stopped at {timer.elapsed_minutes} min")

    def remove_timer(self, table_id: str) -> None:
        self._timers.pop(table_id, None)

    def get_timer(self, table_id: str) -> Optional[TableTimer]:
        timer = self._timers.get(table_id)
        return replace(timer) if timer else None

    def timers(self) -> list[TableTimer]:
        return [replace(t) for t in self._timers.values()]

    def active_count(self) -> int:
        return sum(1 for t in self._timers.values() if t.is_active)

    def refresh(self) -> int:
        """Recompute elapsed time and status of every active timer. Returns how many changed status."""
        now = self._clock()
        changed = 0
        for timer in self._timers.values():
            if not timer.is_active:
                continue
            timer.elapsed_minutes = elapsed_minutes_since(timer.start_time, now)
            status = classify(timer.elapsed_minutes, timer.duration)
            if status != timer.status:
                changed += 1
                logger.info(f"[TIMER] {timer.id}: {timer.status.value} → {status.value} "
                            f"({timer.elapsed_minutes}/{timer.duration} min)")
            timer.status = status
        return changed

    def __len__(self):
        return len(self._timers)

    def __contains__(self, table_id: str):
        return table_id in self._timers
