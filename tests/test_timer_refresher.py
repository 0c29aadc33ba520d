"""Unit tests for the periodic timer refresher."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import pytest
from app.services.table_timer import TimerStatus, TimerStore
from app.services.timer_refresher import TimerRefresher


class TestTimerRefresher:
    def test_tick_refreshes_store(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1", 100)
        refresher = TimerRefresher(store)

        clock.advance(minutes=80)
        refresher.tick()

        assert store.get_timer("mesa-1").elapsed_minutes == 80
        assert store.get_timer("mesa-1").status == TimerStatus.YELLOW

    @pytest.mark.asyncio
    async def test_loop_ticks_on_interval(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1", 10)
        clock.advance(minutes=12)
        refresher = TimerRefresher(store, interval_seconds=0.01)

        refresher.start()
        await asyncio.sleep(0.05)
        await refresher.stop()

        assert store.get_timer("mesa-1").status == TimerStatus.RED

    @pytest.mark.asyncio
    async def test_no_mutation_after_stop(self, clock):
        store = TimerStore(clock=clock)
        store.start_timer("mesa-1", 10)
        refresher = TimerRefresher(store, interval_seconds=0.01)
        refresher.start()
        await refresher.stop()

        clock.advance(minutes=30)
        assert refresher.tick() == 0
        await asyncio.sleep(0.03)

        assert refresher.disposed is True
        assert refresher.running is False
        assert store.get_timer("mesa-1").elapsed_minutes == 0

    @pytest.mark.asyncio
    async def test_start_is_idempotent_and_restart_refused(self, clock):
        refresher = TimerRefresher(TimerStore(clock=clock), interval_seconds=10)
        refresher.start()
        task = refresher._task
        refresher.start()
        assert refresher._task is task
        await refresher.stop()

        with pytest.raises(RuntimeError):
            refresher.start()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, clock):
        refresher = TimerRefresher(TimerStore(clock=clock))
        await refresher.stop()
        assert refresher.disposed is True
