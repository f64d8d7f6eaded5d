"""Workout timer session endpoints: timer actions, lifecycle reports, notification responses."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from session_timer.api.deps import get_runtime
from session_timer.db.session import get_db
from session_timer.schemas.session import (
    CompleteWorkoutRequest,
    ElapsedUpdate,
    LifecycleUpdate,
    LiveActivityRead,
    NotificationResponseIn,
    NotificationResponseResult,
    NotificationSurfaceRead,
    RouteUpdate,
    SessionRead,
    StartWorkoutRequest,
    SurfacesRead,
    TimerStateRead,
)
from session_timer.schemas.workout import WorkoutReadWithDuration
from session_timer.services.runtime import SessionRuntime
from session_timer.services.time_format import format_elapsed
from session_timer.services.timer_store import TimerState, TimerStateError
from session_timer.services.workout_log import record_completed_workout

router = APIRouter()


def _timer_read(state: TimerState) -> TimerStateRead:
    return TimerStateRead(
        is_workout_active=state.is_workout_active,
        is_running=state.is_running,
        time_elapsed_seconds=state.time_elapsed_seconds,
        formatted_time=format_elapsed(state.time_elapsed_seconds),
        workout_name=state.workout_name,
        workout_id=state.workout_id,
        workout_start_time=state.workout_start_time,
    )


def _session_read(runtime: SessionRuntime) -> SessionRead:
    return SessionRead(
        timer=_timer_read(runtime.store.get_state()),
        phase=runtime.coordinator.phase,
        app_state=runtime.coordinator.app_state,
    )


@router.get("", response_model=SessionRead)
async def get_session(runtime: SessionRuntime = Depends(get_runtime)):
    """Current timer snapshot plus the coordinator phase and app state."""
    return _session_read(runtime)


@router.post("/start", response_model=SessionRead, status_code=201)
async def start_workout(
    payload: StartWorkoutRequest,
    runtime: SessionRuntime = Depends(get_runtime),
):
    """Start a workout; the timer runs immediately."""
    try:
        runtime.store.start_workout(payload.workout_name, payload.workout_id)
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_read(runtime)


@router.post("/pause", response_model=SessionRead)
async def pause_workout(runtime: SessionRuntime = Depends(get_runtime)):
    try:
        runtime.store.pause()
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_read(runtime)


@router.post("/resume", response_model=SessionRead)
async def resume_workout(runtime: SessionRuntime = Depends(get_runtime)):
    try:
        runtime.store.resume()
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_read(runtime)


@router.post("/reset", response_model=SessionRead)
async def reset_workout(runtime: SessionRuntime = Depends(get_runtime)):
    """Restart the active workout's clock from zero."""
    try:
        runtime.store.reset()
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_read(runtime)


@router.post("/complete", response_model=WorkoutReadWithDuration)
async def complete_workout(
    payload: CompleteWorkoutRequest | None = None,
    runtime: SessionRuntime = Depends(get_runtime),
    db: AsyncSession = Depends(get_db),
):
    """
    Record the workout, then stop it. If the write fails the workout stays active so the
    client can retry. Surfaces are dismissed/ended by the coordinator.
    """
    try:
        completed = runtime.store.completion()
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    payload = payload or CompleteWorkoutRequest()
    workout = await record_completed_workout(
        db, completed, notes=payload.notes, intensity=payload.intensity
    )
    runtime.store.complete_workout(completed)
    return WorkoutReadWithDuration(
        id=workout.id,
        name=workout.name,
        started_at=workout.started_at,
        ended_at=workout.ended_at,
        duration_seconds=workout.duration_seconds,
        notes=workout.notes,
        intensity=workout.intensity,
        formatted_duration=format_elapsed(completed.duration_seconds),
    )


@router.put("/elapsed", response_model=SessionRead)
async def set_elapsed(
    payload: ElapsedUpdate,
    runtime: SessionRuntime = Depends(get_runtime),
):
    """Correct the elapsed time of the active workout; counting continues from the new value."""
    try:
        runtime.store.set_time_elapsed(payload.seconds)
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_read(runtime)


@router.post("/lifecycle", response_model=SessionRead)
async def report_lifecycle(
    payload: LifecycleUpdate,
    runtime: SessionRuntime = Depends(get_runtime),
):
    """Client reports a foreground/background/inactive transition."""
    runtime.coordinator.handle_app_state_change(payload.state)
    return _session_read(runtime)


@router.post("/notification/response", response_model=NotificationResponseResult)
async def notification_response(
    payload: NotificationResponseIn,
    runtime: SessionRuntime = Depends(get_runtime),
):
    """Notification tap or action button (pause / resume)."""
    handled = runtime.notifications.dispatch_response(payload.action_identifier, payload.data)
    return NotificationResponseResult(
        handled=handled,
        current_route=runtime.navigator.current_route,
    )


@router.put("/route", response_model=NotificationResponseResult)
async def report_route(
    payload: RouteUpdate,
    runtime: SessionRuntime = Depends(get_runtime),
):
    """Client reports the screen it is on (used to skip redundant tap navigation)."""
    runtime.navigator.set_current_route(payload.route)
    return NotificationResponseResult(handled=True, current_route=runtime.navigator.current_route)


@router.get("/surfaces", response_model=SurfacesRead)
async def get_surfaces(runtime: SessionRuntime = Depends(get_runtime)):
    """What the notification and the live activity currently show."""
    await runtime.coordinator.drain()
    surface = runtime.notifications.current
    notification = None
    if surface is not None:
        notification = NotificationSurfaceRead(
            identifier=surface.identifier,
            heading=surface.heading,
            title=surface.title,
            body=surface.body,
            formatted_elapsed_time=surface.formatted_elapsed_time,
            is_paused=surface.is_paused,
            start_time_label=surface.start_time_label,
            category=surface.category,
            actions=runtime.notifications.category_actions,
            chronometer_base=surface.chronometer_base,
        )
    live_activity = None
    record = runtime.activity_module.current if runtime.activity_module is not None else None
    if record is not None:
        live_activity = LiveActivityRead(
            activity_id=record.activity_id,
            workout_name=record.workout_name,
            elapsed_seconds=record.elapsed_seconds,
            is_paused=record.is_paused,
        )
    return SurfacesRead(
        live_activity_supported=runtime.coordinator.capabilities.has_live_activity,
        notification=notification,
        live_activity=live_activity,
        current_route=runtime.navigator.current_route,
        surface_failures=runtime.coordinator.surface_failures,
    )
