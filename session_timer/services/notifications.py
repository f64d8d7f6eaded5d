"""Ongoing workout notification: show/update in place, dismiss, and route action responses."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from session_timer.core.constants import (
    PAUSED_STATUS,
    RUNNING_STATUS,
    WORKOUT_NOTIFICATION_CATEGORY,
    WORKOUT_NOTIFICATION_ID,
    WORKOUT_SESSION_SCREEN,
)
from session_timer.core.enums import NotificationAction

logger = logging.getLogger(__name__)

Handler = Callable[[], None]


@dataclass(frozen=True)
class NotificationSurface:
    """What the platform notification currently shows."""

    title: str
    formatted_elapsed_time: str
    is_paused: bool
    start_time_label: str
    body: str
    heading: str = ""
    identifier: str = WORKOUT_NOTIFICATION_ID
    category: str = WORKOUT_NOTIFICATION_CATEGORY
    chronometer_base: datetime | None = None  # Lets the platform count on its own between updates
    data: dict[str, Any] = field(default_factory=dict)


class Subscription:
    """Handle returned by set_response_handlers; remove() detaches the handlers."""

    def __init__(self, on_remove: Callable[[], None]) -> None:
        self._on_remove = on_remove
        self.removed = False

    def remove(self) -> None:
        if not self.removed:
            self.removed = True
            self._on_remove()


class NotificationPort(Protocol):
    async def show(
        self,
        title: str,
        formatted_time: str,
        is_paused: bool,
        start_time_label: str,
        start_timestamp: datetime | None = None,
    ) -> None: ...

    async def dismiss(self) -> None: ...

    def set_response_handlers(
        self, on_pause: Handler, on_resume: Handler, on_tap: Handler
    ) -> Subscription: ...


@dataclass
class _Handlers:
    on_pause: Handler
    on_resume: Handler
    on_tap: Handler


class NotificationService:
    """
    In-process notification center. Holds the one workout notification so the API can expose it;
    repeated show() calls replace it under the same identifier instead of stacking new ones.
    """

    def __init__(
        self, heading: str = "Workout in Progress", workout_screen: str = WORKOUT_SESSION_SCREEN
    ) -> None:
        self._heading = heading
        self._screen = workout_screen
        self._current: NotificationSurface | None = None
        self._handlers: _Handlers | None = None
        self.shown_count = 0
        # Pause / resume buttons of the workout category, registered once
        self._category_actions = [NotificationAction.PAUSE.value, NotificationAction.RESUME.value]

    @property
    def current(self) -> NotificationSurface | None:
        return self._current

    @property
    def category_actions(self) -> list[str]:
        return list(self._category_actions)

    async def show(
        self,
        title: str,
        formatted_time: str,
        is_paused: bool,
        start_time_label: str,
        start_timestamp: datetime | None = None,
    ) -> None:
        status = PAUSED_STATUS if is_paused else RUNNING_STATUS
        self._current = NotificationSurface(
            title=title,
            formatted_elapsed_time=formatted_time,
            is_paused=is_paused,
            start_time_label=start_time_label,
            body=f"{status} {title}",
            heading=self._heading,
            chronometer_base=start_timestamp,
            data={
                "screen": self._screen,
                "type": WORKOUT_NOTIFICATION_CATEGORY,
                "time": formatted_time,
            },
        )
        self.shown_count += 1
        logger.debug("Workout notification updated: %s (paused=%s)", formatted_time, is_paused)

    async def dismiss(self) -> None:
        if self._current is None:
            return
        self._current = None
        logger.info("Workout notification dismissed")

    def set_response_handlers(
        self, on_pause: Handler, on_resume: Handler, on_tap: Handler
    ) -> Subscription:
        handlers = _Handlers(on_pause=on_pause, on_resume=on_resume, on_tap=on_tap)
        self._handlers = handlers

        def detach() -> None:
            if self._handlers is handlers:
                self._handlers = None

        return Subscription(detach)

    def dispatch_response(
        self, action_identifier: str, data: Mapping[str, Any] | None = None
    ) -> bool:
        """
        Route a notification response to the registered handler.
        Returns False when nothing handled it (no handlers, unknown action, tap on another screen).
        """
        handlers = self._handlers
        if handlers is None:
            logger.warning("Notification response %r with no handlers registered", action_identifier)
            return False
        if action_identifier == NotificationAction.PAUSE:
            logger.info("Pause action tapped")
            handlers.on_pause()
            return True
        if action_identifier == NotificationAction.RESUME:
            logger.info("Resume action tapped")
            handlers.on_resume()
            return True
        if action_identifier == NotificationAction.DEFAULT:
            screen = (data or {}).get("screen")
            if screen != self._screen:
                logger.debug("Ignoring tap on notification for screen %r", screen)
                return False
            logger.info("Notification tapped - opening workout session")
            handlers.on_tap()
            return True
        logger.warning("Unknown notification action %r", action_identifier)
        return False
