"""Keeps the active workout timer in the database so a running workout survives a restart."""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import partial
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from session_timer.core.constants import TIMER_STORAGE_KEY
from session_timer.models.active_timer import ActiveTimer
from session_timer.services.surface_queue import SurfaceQueue
from session_timer.services.timer_store import TimerSnapshot, TimerState, TimerStateError, TimerStore

logger = logging.getLogger(__name__)


class TimerStorage(Protocol):
    async def load(self) -> TimerSnapshot | None: ...

    async def save(self, snapshot: TimerSnapshot) -> None: ...


def snapshot_from_row(row: ActiveTimer) -> TimerSnapshot:
    return TimerSnapshot(
        state=TimerState(
            is_workout_active=True,
            is_running=row.is_running,
            time_elapsed_seconds=row.time_elapsed_seconds,
            workout_name=row.workout_name,
            workout_start_time=row.workout_start_time,
            workout_id=row.workout_id,
            last_pause_time=row.last_pause_time,
        ),
        started_at=row.started_at,
    )


def apply_snapshot(row: ActiveTimer, snapshot: TimerSnapshot) -> ActiveTimer:
    state = snapshot.state
    row.workout_id = state.workout_id
    row.workout_name = state.workout_name
    row.is_running = state.is_running
    row.time_elapsed_seconds = state.time_elapsed_seconds
    row.workout_start_time = state.workout_start_time
    row.started_at = snapshot.started_at
    row.last_pause_time = state.last_pause_time
    return row


class SqlTimerStorage:
    """Single-row storage in active_timers; an idle timer deletes the row."""

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], key: str = TIMER_STORAGE_KEY
    ) -> None:
        self._session_factory = session_factory
        self._key = key

    async def load(self) -> TimerSnapshot | None:
        async with self._session_factory() as db:
            row = await db.get(ActiveTimer, self._key)
            return snapshot_from_row(row) if row is not None else None

    async def save(self, snapshot: TimerSnapshot) -> None:
        async with self._session_factory() as db:
            row = await db.get(ActiveTimer, self._key)
            if not snapshot.state.is_workout_active:
                if row is not None:
                    await db.delete(row)
            else:
                if row is None:
                    row = ActiveTimer(key=self._key)
                    db.add(row)
                apply_snapshot(row, snapshot)
            await db.commit()


def _without_elapsed(state: TimerState) -> TimerState:
    return replace(state, time_elapsed_seconds=0)


class TimerPersister:
    """
    Follows the store and saves it whenever something other than the elapsed seconds changed.
    Ticks are not written: elapsed time is derived from the saved start on restore.
    Saves run in their own queue, so a slow or failing database never blocks the timer.
    """

    def __init__(self, store: TimerStore, storage: TimerStorage) -> None:
        self._store = store
        self._storage = storage
        self._queue = SurfaceQueue("timer_storage")
        self._last: TimerState | None = None
        self._unsubscribe = None

    @property
    def failures(self) -> int:
        return self._queue.failures

    async def restore(self) -> bool:
        """Load the saved workout into the store. Returns True if one was restored."""
        try:
            snapshot = await self._storage.load()
        except Exception:
            logger.exception("Could not load the saved workout timer")
            return False
        if snapshot is None:
            return False
        try:
            self._store.restore(snapshot)
        except TimerStateError:
            logger.warning("Saved workout %s not restored, a workout is already active", snapshot.state.workout_id)
            return False
        return True

    def start(self) -> None:
        self._queue.start()
        self._last = self._store.get_state()
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._on_state)

    async def drain(self) -> None:
        await self._queue.join()

    async def aclose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self._queue.aclose()

    def _on_state(self, state: TimerState) -> None:
        previous, self._last = self._last, state
        if previous is not None and _without_elapsed(previous) == _without_elapsed(state):
            return
        self._queue.submit("save", partial(self._storage.save, self._store.snapshot()), coalesce_key="save")
