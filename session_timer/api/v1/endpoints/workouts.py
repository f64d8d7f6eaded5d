"""Recorded workout endpoints (sessions written by /session/complete)."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from session_timer.db.session import get_db
from session_timer.models.workout import Workout
from session_timer.schemas.workout import WorkoutReadWithDuration
from session_timer.services.time_format import format_elapsed

router = APIRouter()


def _read(w: Workout) -> WorkoutReadWithDuration:
    return WorkoutReadWithDuration(
        id=w.id,
        name=w.name,
        started_at=w.started_at,
        ended_at=w.ended_at,
        duration_seconds=w.duration_seconds,
        notes=w.notes,
        intensity=w.intensity,
        formatted_duration=format_elapsed(w.duration_seconds) if w.duration_seconds is not None else None,
    )


@router.get("", response_model=list[WorkoutReadWithDuration])
async def list_workouts(
    db: AsyncSession = Depends(get_db),
    skip: int = 0,
    limit: int = 50,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
):
    """List recorded workouts, newest first, optionally filtered by date range."""
    stmt = select(Workout)
    if from_date:
        stmt = stmt.where(Workout.started_at >= from_date)
    if to_date:
        stmt = stmt.where(Workout.started_at <= to_date)
    stmt = stmt.order_by(Workout.started_at.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return [_read(w) for w in result.scalars().all()]


@router.get("/{workout_id}", response_model=WorkoutReadWithDuration)
async def get_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Workout).where(Workout.id == workout_id))
    workout = result.scalar_one_or_none()
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return _read(workout)


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Workout).where(Workout.id == workout_id))
    workout = result.scalar_one_or_none()
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    await db.delete(workout)
    return None
