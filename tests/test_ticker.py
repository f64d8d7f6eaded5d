# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import unittest

from fakes import ManualClock

from session_timer.services.ticker import TimerTicker
from session_timer.services.timer_store import TimerStore


class SteppingStore(TimerStore):
    """Advances the manual clock one second per tick, like a real second passing."""

    def __init__(self, clock: ManualClock) -> None:
        super().__init__(clock=clock)
        self.manual_clock = clock
        self.ticks = 0

    def tick(self):
        self.ticks += 1
        self.manual_clock.advance(1)
        return super().tick()


class TestTimerTicker(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.store = SteppingStore(ManualClock())
        self.ticker = TimerTicker(self.store, interval_seconds=0.005)
        self.ticker.start()

    async def asyncTearDown(self) -> None:
        await self.ticker.aclose()

    async def test_idle_store_does_not_tick(self) -> None:
        await asyncio.sleep(0.03)
        self.assertFalse(self.ticker.is_ticking)
        self.assertEqual(self.store.ticks, 0)

    async def test_ticks_only_while_running(self) -> None:
        self.store.start_workout("Push Day")
        self.assertTrue(self.ticker.is_ticking)
        await asyncio.sleep(0.05)
        self.assertGreater(self.store.get_state().time_elapsed_seconds, 0)

        self.store.pause()
        self.assertFalse(self.ticker.is_ticking)
        frozen = self.store.ticks
        await asyncio.sleep(0.03)
        self.assertEqual(self.store.ticks, frozen)

        self.store.resume()
        self.assertTrue(self.ticker.is_ticking)
        self.store.complete_workout()
        self.assertFalse(self.ticker.is_ticking)

    async def test_single_task_across_changes(self) -> None:
        self.store.start_workout("Push Day")
        first = self.ticker._task
        await asyncio.sleep(0.03)
        self.assertIs(self.ticker._task, first)

    async def test_aclose_stops_following_the_store(self) -> None:
        await self.ticker.aclose()
        self.store.start_workout("Push Day")
        self.assertFalse(self.ticker.is_ticking)


if __name__ == "__main__":
    unittest.main()
