"""Timer session request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from session_timer.core.constants import MAX_WORKOUT_NAME_LENGTH
from session_timer.core.enums import AppLifecycleState, CoordinatorPhase, WorkoutIntensity


class StartWorkoutRequest(BaseModel):
    workout_name: str = Field(min_length=1, max_length=MAX_WORKOUT_NAME_LENGTH)
    workout_id: str | None = None


class CompleteWorkoutRequest(BaseModel):
    notes: str | None = None
    intensity: WorkoutIntensity | None = None


class ElapsedUpdate(BaseModel):
    seconds: int = Field(ge=0, description="Corrected elapsed time of the active workout")


class LifecycleUpdate(BaseModel):
    state: AppLifecycleState


class NotificationResponseIn(BaseModel):
    action_identifier: str = Field(description="pause, resume, or default (tap on the notification)")
    data: dict[str, Any] = Field(default_factory=dict)


class NotificationResponseResult(BaseModel):
    handled: bool
    current_route: str


class RouteUpdate(BaseModel):
    route: str = Field(min_length=1)


class TimerStateRead(BaseModel):
    is_workout_active: bool
    is_running: bool
    time_elapsed_seconds: int = Field(ge=0)
    formatted_time: str
    workout_name: str | None = None
    workout_id: str | None = None
    workout_start_time: datetime | None = None


class SessionRead(BaseModel):
    timer: TimerStateRead
    phase: CoordinatorPhase
    app_state: AppLifecycleState


class NotificationSurfaceRead(BaseModel):
    identifier: str
    heading: str
    title: str
    body: str
    formatted_elapsed_time: str
    is_paused: bool
    start_time_label: str
    category: str
    actions: list[str] = []
    chronometer_base: datetime | None = None


class LiveActivityRead(BaseModel):
    activity_id: str
    workout_name: str
    elapsed_seconds: int
    is_paused: bool


class SurfacesRead(BaseModel):
    live_activity_supported: bool
    notification: NotificationSurfaceRead | None = None
    live_activity: LiveActivityRead | None = None
    current_route: str
    surface_failures: int = 0
