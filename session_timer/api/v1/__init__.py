"""API v1 router aggregation."""

from fastapi import APIRouter

from session_timer.api.v1.endpoints import (
    health,
    session,
    workouts,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(session.router, prefix="/session", tags=["session"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
