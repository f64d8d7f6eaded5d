"""Write a completed timer session to the workouts table."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from session_timer.core.enums import WorkoutIntensity
from session_timer.models.workout import Workout
from session_timer.services.timer_store import CompletedWorkout


def _as_uuid(value: str | None) -> uuid.UUID:
    """Client workout ids are kept when they are UUIDs; anything else gets a fresh id."""
    if value:
        try:
            return uuid.UUID(value)
        except ValueError:
            pass
    return uuid.uuid4()


async def record_completed_workout(
    db: AsyncSession,
    completed: CompletedWorkout,
    notes: str | None = None,
    intensity: WorkoutIntensity | None = None,
) -> Workout:
    workout = Workout(
        id=_as_uuid(completed.workout_id),
        name=completed.workout_name,
        started_at=completed.started_at or completed.ended_at,
        ended_at=completed.ended_at,
        duration_seconds=completed.duration_seconds,
        notes=notes,
        intensity=intensity.value if intensity else None,
    )
    db.add(workout)
    await db.flush()
    await db.refresh(workout)
    return workout
