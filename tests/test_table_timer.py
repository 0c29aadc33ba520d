"""Unit tests for the table timer store and status classifier."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.services.table_timer import TimerStatus, TimerStore, classify, elapsed_minutes_since


class TestClassify:
    @pytest.mark.parametrize("elapsed, duration, expected", [
        (30, 120, TimerStatus.GREEN),
        (89, 120, TimerStatus.GREEN),
        (90, 120, TimerStatus.YELLOW),
        (119, 120, TimerStatus.YELLOW),
        (120, 120, TimerStatus.RED),
        (300, 120, TimerStatus.RED),
        (0, 120, TimerStatus.GREEN),
    ])
    def test_thresholds(self, elapsed, duration, expected):
        assert classify(elapsed, duration) == expected

    def test_zero_duration_is_red(self):
        assert classify(0, 0) == TimerStatus.RED
        assert classify(5, 0) == TimerStatus.RED


class TestTimerStore:
    def test_start_then_get_is_fresh(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1")
        timer = store.get_timer("mesa-1")
        assert timer.is_active is True
        assert timer.elapsed_minutes == 0
        assert timer.status == TimerStatus.GREEN
        assert timer.duration == 120
        assert timer.start_time == clock.now

    def test_start_overwrites_existing(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1", 60)
        clock.advance(minutes=50)
        store.refresh()
        store.start_timer("mesa-1", 90)

        timer = store.get_timer("mesa-1")
        assert timer.duration == 90
        assert timer.elapsed_minutes == 0
        assert timer.start_time == clock.now
        assert len(store) == 1

    def test_stop_marks_inactive(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1")
        store.stop_timer("mesa-1")
        assert store.get_timer("mesa-1").is_active is False

    def test_stop_unknown_is_noop(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1")
        before = store.timers()

        store.stop_timer("does-not-exist")

        assert store.timers() == before
        assert "does-not-exist" not in store

    def test_remove_then_get_returns_none(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1")
        store.remove_timer("mesa-1")
        assert store.get_timer("mesa-1") is None
        store.remove_timer("mesa-1")  # unconditional, no error

    def test_snapshots_are_copies(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1")
        snapshot = store.get_timer("mesa-1")
        snapshot.is_active = False
        assert store.get_timer("mesa-1").is_active is True

    def test_refresh_recomputes_active_only(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1", 120)
        store.start_timer("mesa-2", 120)
        store.stop_timer("mesa-2")

        clock.advance(minutes=95, seconds=30)
        changed = store.refresh()

        assert changed == 1
        active = store.get_timer("mesa-1")
        assert active.elapsed_minutes == 95
        assert active.status == TimerStatus.YELLOW
        stopped = store.get_timer("mesa-2")
        assert stopped.elapsed_minutes == 0
        assert stopped.status == TimerStatus.GREEN

    def test_refresh_goes_red_when_overdue(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1", 60)
        clock.advance(minutes=61)
        store.refresh()
        assert store.get_timer("mesa-1").status == TimerStatus.RED

    def test_default_duration_is_configurable(self, clock):
        store = TimerStore(default_duration=90, clock=clock)
        assert store.start_timer("mesa-1").duration == 90

    def test_timers_keep_insertion_order(self, clock):
        store = TimerStore(clock=clock)
        for table_id in ("b", "a", "c"):
            store.start_timer(table_id)
        assert [t.id for t in store.timers()] == ["b", "a", "c"]
        assert store.active_count() == 3


class TestElapsedMinutes:
    def test_never_negative(self, clock):
        later = clock.now
        clock.advance(minutes=-5)
        assert elapsed_minutes_since(later, clock.now) == 0

    def test_floors_partial_minutes(self, clock):
        start = clock.now
        clock.advance(minutes=2, seconds=59)
        assert elapsed_minutes_since(start, clock.now) == 2

    def test_zero_duration_starts_red(self, clock):
        store = TimerStore(clock=clock)
        timer = store.start_timer("mesa-1", 0)
        assert timer.status == TimerStatus.RED
        assert store.refresh() == 0
        assert store.get_timer("mesa-1").status == classify(0, 0)
