"""ORM models - import all so Base.metadata is complete for migrations."""

from session_timer.models.active_timer import ActiveTimer
from session_timer.models.workout import Workout

__all__ = [
    "ActiveTimer",
    "Workout",
]
