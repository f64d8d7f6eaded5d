"""Lock-screen live activity for the running workout (platform-gated)."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from session_timer.core.constants import LIVE_ACTIVITY_DISMISSAL_POLICY

logger = logging.getLogger(__name__)


class ActivityModule(Protocol):
    """Native module that owns the OS live activities."""

    async def start_activity(self, attributes: dict[str, Any], content_state: dict[str, Any]) -> str: ...

    async def update_activity(self, activity_id: str, content_state: dict[str, Any]) -> None: ...

    async def end_activity(
        self, activity_id: str, content_state: dict[str, Any], dismissal_policy: str
    ) -> None: ...


class LiveActivityPort(Protocol):
    def is_supported(self) -> bool: ...

    async def start(self, workout_name: str, start_time: datetime) -> str | None: ...

    async def update(self, elapsed_seconds: int, is_paused: bool) -> None: ...

    async def end(self, final_elapsed_seconds: int) -> None: ...


class LiveActivityService:
    """
    Wraps the native activity module and remembers the current activity id.
    Without a module the feature is unsupported and every call is a no-op.
    Module errors are logged and swallowed: the live activity is a best-effort surface.
    """

    def __init__(self, module: ActivityModule | None = None) -> None:
        self._module = module
        self._activity_id: str | None = None
        self._elapsed_seconds = 0

    def is_supported(self) -> bool:
        return self._module is not None

    def has_active_activity(self) -> bool:
        return self._activity_id is not None

    @property
    def activity_id(self) -> str | None:
        return self._activity_id

    async def start(self, workout_name: str, start_time: datetime) -> str | None:
        if self._module is None:
            logger.info("Live activities not supported, using notification only")
            return None
        if self._activity_id is not None:
            # One activity at a time; a held one would otherwise never be ended
            logger.warning("Live activity %s still open, ending it first", self._activity_id)
            await self.end(self._elapsed_seconds)
        try:
            activity_id = await self._module.start_activity(
                {"workout_name": workout_name, "start_time": start_time.timestamp()},
                {"elapsed_seconds": 0, "is_paused": False},
            )
        except Exception:
            logger.exception("Error starting live activity")
            return None
        self._activity_id = activity_id
        self._elapsed_seconds = 0
        logger.info("Live activity started: %s", activity_id)
        return activity_id

    async def update(self, elapsed_seconds: int, is_paused: bool) -> None:
        if self._module is None or self._activity_id is None:
            return
        self._elapsed_seconds = elapsed_seconds
        try:
            await self._module.update_activity(
                self._activity_id,
                {"elapsed_seconds": elapsed_seconds, "is_paused": is_paused},
            )
        except Exception:
            logger.exception("Error updating live activity")

    async def end(self, final_elapsed_seconds: int) -> None:
        if self._module is None or self._activity_id is None:
            return
        activity_id, self._activity_id = self._activity_id, None
        try:
            await self._module.end_activity(
                activity_id,
                {"elapsed_seconds": final_elapsed_seconds, "is_paused": True},
                LIVE_ACTIVITY_DISMISSAL_POLICY,
            )
        except Exception:
            logger.exception("Error ending live activity %s", activity_id)
            return
        logger.info("Live activity ended: %s", activity_id)


@dataclass
class LiveActivityRecord:
    activity_id: str
    workout_name: str
    start_time: float
    elapsed_seconds: int
    is_paused: bool
    ended: bool = False
    dismissal_policy: str | None = None


class InMemoryActivityModule:
    """Activity module for hosts without a native one: keeps activities in memory for the API."""

    def __init__(self) -> None:
        self.activities: dict[str, LiveActivityRecord] = {}

    @property
    def current(self) -> LiveActivityRecord | None:
        live = [a for a in self.activities.values() if not a.ended]
        return live[-1] if live else None

    async def start_activity(self, attributes: dict[str, Any], content_state: dict[str, Any]) -> str:
        activity_id = str(uuid.uuid4())
        self.activities[activity_id] = LiveActivityRecord(
            activity_id=activity_id,
            workout_name=attributes["workout_name"],
            start_time=attributes["start_time"],
            elapsed_seconds=content_state["elapsed_seconds"],
            is_paused=content_state["is_paused"],
        )
        return activity_id

    async def update_activity(self, activity_id: str, content_state: dict[str, Any]) -> None:
        record = self._get(activity_id)
        record.elapsed_seconds = content_state["elapsed_seconds"]
        record.is_paused = content_state["is_paused"]

    async def end_activity(
        self, activity_id: str, content_state: dict[str, Any], dismissal_policy: str
    ) -> None:
        record = self._get(activity_id)
        record.elapsed_seconds = content_state["elapsed_seconds"]
        record.is_paused = content_state["is_paused"]
        record.ended = True
        record.dismissal_policy = dismissal_policy

    def _get(self, activity_id: str) -> LiveActivityRecord:
        record = self.activities.get(activity_id)
        if record is None or record.ended:
            raise LookupError(f"No live activity {activity_id}")
        return record
