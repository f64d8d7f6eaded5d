"""Shared endpoint dependencies."""

from fastapi import Request

from session_timer.services.runtime import SessionRuntime


def get_runtime(request: Request) -> SessionRuntime:
    """The SessionRuntime built in the application lifespan."""
    return request.app.state.runtime
