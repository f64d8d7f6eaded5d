"""The one-second tick source that advances the timer store while a workout runs."""

from __future__ import annotations

import asyncio
import logging

from session_timer.services.timer_store import TimerState, TimerStore

logger = logging.getLogger(__name__)


class TimerTicker:
    """
    Runs a single asyncio task while the timer is running and calls TimerStore.tick()
    every interval. It is the only thing allowed to advance elapsed time.
    """

    def __init__(self, store: TimerStore, interval_seconds: float = 1.0) -> None:
        self._store = store
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None
        self._unsubscribe = None

    @property
    def is_ticking(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Follow the store: tick while running, stop when paused or completed."""
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._on_state)
        self._on_state(self._store.get_state())

    async def aclose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self._cancel()

    def _on_state(self, state: TimerState) -> None:
        should_tick = state.is_running and state.is_workout_active
        if should_tick and not self.is_ticking:
            self._task = asyncio.get_running_loop().create_task(self._run())
        elif not should_tick and self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval)
                self._store.tick()
        except asyncio.CancelledError:
            logger.debug("Timer ticker stopped")
            raise

    async def _cancel(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
