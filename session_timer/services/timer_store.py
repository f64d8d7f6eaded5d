"""Authoritative workout timer state: start/pause/resume/complete plus per-second ticks."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
TimerListener = Callable[["TimerState"], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TimerState:
    """Snapshot of the workout timer. is_running implies is_workout_active."""

    is_workout_active: bool = False
    is_running: bool = False
    time_elapsed_seconds: int = 0
    workout_name: str | None = None
    workout_start_time: datetime | None = None  # Shifted forward by every pause
    workout_id: str | None = None
    last_pause_time: datetime | None = None


@dataclass(frozen=True)
class CompletedWorkout:
    workout_id: str | None
    workout_name: str | None
    started_at: datetime | None
    ended_at: datetime
    duration_seconds: int


@dataclass(frozen=True)
class TimerSnapshot:
    """What is kept across restarts: the state plus the unshifted start of the workout."""

    state: TimerState
    started_at: datetime | None = None


class TimerStateError(RuntimeError):
    """Timer action not allowed in the current state (e.g. pause with no workout)."""


class TimerStore:
    """
    Holds the single TimerState and notifies subscribers after every change.
    Elapsed time is derived from the wall clock (now - adjusted start) so a late tick
    never loses time; it is never allowed to go backwards while running.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._state = TimerState()
        self._original_start: datetime | None = None
        self._last_completed: CompletedWorkout | None = None
        self._listeners: list[TimerListener] = []

    def get_state(self) -> TimerState:
        return self._state

    @property
    def last_completed(self) -> CompletedWorkout | None:
        return self._last_completed

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(state=self._state, started_at=self._original_start)

    def subscribe(self, listener: TimerListener) -> Callable[[], None]:
        """Register a listener for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- Actions ----

    def start_workout(self, workout_name: str, workout_id: str | None = None) -> TimerState:
        if self._state.is_workout_active:
            raise TimerStateError("A workout is already active")
        now = self._clock()
        self._original_start = now
        self._set(
            TimerState(
                is_workout_active=True,
                is_running=True,
                time_elapsed_seconds=0,
                workout_name=workout_name,
                workout_start_time=now,
                workout_id=workout_id or str(uuid.uuid4()),
                last_pause_time=None,
            )
        )
        logger.info("Workout started: %s (%s)", workout_name, self._state.workout_id)
        return self._state

    def pause(self) -> TimerState:
        """Freeze elapsed time. No-op when already paused."""
        state = self._require_active()
        if not state.is_running:
            return state
        now = self._clock()
        self._set(
            replace(
                state,
                is_running=False,
                time_elapsed_seconds=self._elapsed_at(now),
                last_pause_time=now,
            )
        )
        return self._state

    def resume(self) -> TimerState:
        """Continue counting; the start is shifted by the pause duration. No-op when running."""
        state = self._require_active()
        if state.is_running:
            return state
        now = self._clock()
        paused_at = state.last_pause_time or now
        start = state.workout_start_time or now
        self._set(
            replace(
                state,
                is_running=True,
                workout_start_time=start + (now - paused_at),
                last_pause_time=None,
            )
        )
        return self._state

    def reset(self) -> TimerState:
        """Restart the clock of the active workout from zero (running)."""
        state = self._require_active()
        self._set(
            replace(
                state,
                is_running=True,
                time_elapsed_seconds=0,
                workout_start_time=self._clock(),
                last_pause_time=None,
            )
        )
        return self._state

    def completion(self) -> CompletedWorkout:
        """What complete_workout() would record right now. Does not change the store."""
        state = self._require_active()
        now = self._clock()
        return CompletedWorkout(
            workout_id=state.workout_id,
            workout_name=state.workout_name,
            started_at=self._original_start,
            ended_at=now,
            duration_seconds=self._elapsed_at(now) if state.is_running else state.time_elapsed_seconds,
        )

    def complete_workout(self, completed: CompletedWorkout | None = None) -> CompletedWorkout:
        """
        End the active workout and return its final duration; the store goes back to idle.
        A summary taken earlier with completion() can be passed so the recorded and the
        reported duration are the same.
        """
        state = self._require_active()
        if completed is None or completed.workout_id != state.workout_id:
            completed = self.completion()
        self._original_start = None
        self._last_completed = completed
        self._set(TimerState())
        logger.info("Workout completed: %s after %ss", completed.workout_name, completed.duration_seconds)
        return completed

    def restore(self, snapshot: TimerSnapshot) -> TimerState:
        """
        Bring back a workout saved before a restart. A running workout keeps counting from
        its start, so the time the process was down is included.
        """
        if self._state.is_workout_active:
            raise TimerStateError("A workout is already active")
        state = snapshot.state
        if not state.is_workout_active:
            return self._state
        if state.is_running and state.workout_start_time is not None:
            computed = int((self._clock() - state.workout_start_time).total_seconds())
            state = replace(state, time_elapsed_seconds=max(state.time_elapsed_seconds, computed))
        self._original_start = snapshot.started_at or state.workout_start_time
        self._set(state)
        logger.info("Workout restored: %s (%s)", state.workout_name, state.workout_id)
        return self._state

    def tick(self) -> TimerState:
        """Recompute elapsed seconds from the clock. Only the ticker calls this."""
        state = self._state
        if not state.is_running or state.workout_start_time is None:
            return state
        elapsed = self._elapsed_at(self._clock())
        if elapsed != state.time_elapsed_seconds:
            self._set(replace(state, time_elapsed_seconds=elapsed))
        return self._state

    def set_time_elapsed(self, seconds: int) -> TimerState:
        """
        Override elapsed seconds (e.g. a correction from the client). The start moves to
        match; when paused it is anchored to the pause time so resume() counts on from here.
        """
        if seconds < 0:
            raise ValueError("elapsed seconds must be >= 0")
        state = self._require_active()
        anchor = self._clock() if state.is_running else (state.last_pause_time or self._clock())
        self._set(
            replace(
                state,
                time_elapsed_seconds=seconds,
                workout_start_time=anchor - timedelta(seconds=seconds),
            )
        )
        return self._state

    # ---- Internals ----

    def _require_active(self) -> TimerState:
        if not self._state.is_workout_active:
            raise TimerStateError("No active workout")
        return self._state

    def _elapsed_at(self, now: datetime) -> int:
        state = self._state
        if state.workout_start_time is None:
            return state.time_elapsed_seconds
        computed = int((now - state.workout_start_time).total_seconds())
        return max(state.time_elapsed_seconds, computed)

    def _set(self, new_state: TimerState) -> None:
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("Timer listener %r failed", listener)
