"""Recorded workout schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from session_timer.core.enums import WorkoutIntensity


class WorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str | None = None
    started_at: datetime
    ended_at: datetime | None = None
    duration_seconds: int | None = None
    notes: str | None = None
    intensity: WorkoutIntensity | None = None


class WorkoutReadWithDuration(WorkoutRead):
    """Workout plus its duration formatted the way the timer shows it."""

    formatted_duration: str | None = None
