"""
Workout session coordinator: keeps the notification and the live activity in step with
the timer store across app foreground/background transitions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import partial

from session_timer.core.enums import AppLifecycleState, CoordinatorPhase
from session_timer.services.live_activity import LiveActivityPort
from session_timer.services.navigation import NavigatorPort
from session_timer.services.notifications import NotificationPort, Subscription
from session_timer.services.surface_queue import SurfaceQueue
from session_timer.services.time_format import format_elapsed, format_start_time_label
from session_timer.services.timer_store import TimerState, TimerStateError, TimerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformCapabilities:
    """Resolved once at startup and threaded through; never re-checked per call."""

    has_live_activity: bool = False


def resolve_capabilities(live_activity: LiveActivityPort, enabled: bool = True) -> PlatformCapabilities:
    return PlatformCapabilities(has_live_activity=enabled and live_activity.is_supported())


class WorkoutSessionCoordinator:
    """
    Phase machine (idle / active_foreground / active_background) driven by timer store changes
    and lifecycle transitions.

    - Notification: shown and updated on every change while backgrounded, dismissed when
      leaving the background phase.
    - Live activity: started once the workout is active, ticked only while backgrounded,
      ended when the workout ends.

    Every surface call goes through its own SurfaceQueue, so calls are applied in order,
    never block the tick, and failures stay inside the queue. Elapsed time always comes
    from the store snapshot; the coordinator owns no timer.
    """

    def __init__(
        self,
        store: TimerStore,
        notifications: NotificationPort,
        live_activity: LiveActivityPort,
        navigator: NavigatorPort,
        capabilities: PlatformCapabilities,
        *,
        workout_route: str = "/workout-session",
        initial_app_state: AppLifecycleState = AppLifecycleState.FOREGROUND,
    ) -> None:
        self._store = store
        self._notifications = notifications
        self._live_activity = live_activity
        self._navigator = navigator
        self.capabilities = capabilities
        self._workout_route = workout_route

        self._app_state = initial_app_state
        self._phase = CoordinatorPhase.IDLE
        self._notification_visible = False
        self._activity_started = False
        self._activity_workout_id: str | None = None
        self._last_elapsed = 0

        self._notification_queue = SurfaceQueue("notification")
        self._activity_queue = SurfaceQueue("live_activity")
        self._unsubscribe = None
        self._response_subscription: Subscription | None = None

    # ---- Lifecycle ----

    def start(self) -> None:
        """Subscribe to the store, register notification handlers and sync once."""
        self._notification_queue.start()
        self._activity_queue.start()
        self._unsubscribe = self._store.subscribe(self._on_timer_change)
        self._response_subscription = self._notifications.set_response_handlers(
            self._pause_from_notification,
            self._resume_from_notification,
            self.handle_notification_tap,
        )
        logger.info("Session coordinator started (live activity: %s)", self.capabilities.has_live_activity)
        self._sync(self._store.get_state())

    async def drain(self) -> None:
        """Wait for every queued surface call to be applied."""
        await self._notification_queue.join()
        await self._activity_queue.join()

    async def aclose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._response_subscription is not None:
            self._response_subscription.remove()
            self._response_subscription = None
        await self._notification_queue.aclose()
        await self._activity_queue.aclose()

    # ---- Inputs ----

    @property
    def phase(self) -> CoordinatorPhase:
        return self._phase

    @property
    def app_state(self) -> AppLifecycleState:
        return self._app_state

    @property
    def surface_failures(self) -> int:
        return self._notification_queue.failures + self._activity_queue.failures

    def handle_app_state_change(self, app_state: AppLifecycleState) -> CoordinatorPhase:
        if app_state is not self._app_state:
            logger.info("App state changed: %s -> %s", self._app_state.value, app_state.value)
        self._app_state = app_state
        self._sync(self._store.get_state())
        return self._phase

    def handle_notification_tap(self) -> bool:
        """Open the workout session unless the client is already on it. Returns True if navigated."""
        if self._navigator.current_route == self._workout_route:
            logger.debug("Notification tap while on %s, ignoring", self._workout_route)
            return False
        self._navigator.replace(self._workout_route)
        return True

    def _pause_from_notification(self) -> None:
        try:
            self._store.pause()
        except TimerStateError:
            logger.warning("Pause action with no active workout")

    def _resume_from_notification(self) -> None:
        try:
            self._store.resume()
        except TimerStateError:
            logger.warning("Resume action with no active workout")

    def _on_timer_change(self, state: TimerState) -> None:
        self._sync(state)

    # ---- Phase machine ----

    def _resolve_phase(self, state: TimerState) -> CoordinatorPhase:
        if not state.is_workout_active:
            return CoordinatorPhase.IDLE
        if self._app_state is AppLifecycleState.BACKGROUND:
            return CoordinatorPhase.ACTIVE_BACKGROUND
        return CoordinatorPhase.ACTIVE_FOREGROUND

    def _sync(self, state: TimerState) -> None:
        previous, phase = self._phase, self._resolve_phase(state)
        self._phase = phase
        if phase is not previous:
            logger.info("Session phase: %s -> %s", previous.value, phase.value)
        if state.is_workout_active:
            self._last_elapsed = state.time_elapsed_seconds
        self._sync_live_activity(state, phase)
        self._sync_notification(state, phase)

    def _sync_notification(self, state: TimerState, phase: CoordinatorPhase) -> None:
        if phase is CoordinatorPhase.ACTIVE_BACKGROUND:
            self._notification_visible = True
            self._notification_queue.submit(
                "show",
                partial(
                    self._notifications.show,
                    state.workout_name or "Workout",
                    format_elapsed(state.time_elapsed_seconds),
                    not state.is_running,
                    format_start_time_label(state.workout_start_time),
                    state.workout_start_time,
                ),
                coalesce_key="show",
            )
        elif self._notification_visible:
            # Edge-triggered: only on the way out of the background phase
            self._notification_visible = False
            self._notification_queue.submit("dismiss", self._notifications.dismiss)

    def _sync_live_activity(self, state: TimerState, phase: CoordinatorPhase) -> None:
        if not self.capabilities.has_live_activity:
            return
        if phase is CoordinatorPhase.IDLE:
            if self._activity_started:
                self._activity_started = False
                self._activity_queue.submit("end", partial(self._live_activity.end, self._final_elapsed()))
            return
        if not self._activity_started and state.workout_name and state.workout_start_time:
            self._activity_started = True
            self._activity_workout_id = state.workout_id
            self._activity_queue.submit(
                "start",
                partial(
                    self._start_activity, state.workout_id, state.workout_name, state.workout_start_time
                ),
            )
        if phase is CoordinatorPhase.ACTIVE_BACKGROUND and self._activity_started:
            self._activity_queue.submit(
                "update",
                partial(self._live_activity.update, state.time_elapsed_seconds, not state.is_running),
                coalesce_key="update",
            )

    def _final_elapsed(self) -> int:
        completed = self._store.last_completed
        if completed is not None and completed.workout_id == self._activity_workout_id:
            return completed.duration_seconds
        return self._last_elapsed

    async def _start_activity(self, workout_id: str | None, workout_name: str, start_time: datetime) -> None:
        activity_id = await self._live_activity.start(workout_name, start_time)
        if activity_id is not None:
            return
        # Only the workout this start belonged to may retry it, on its next store change
        if (
            self._activity_started
            and self._activity_workout_id == workout_id
            and self._store.get_state().workout_id == workout_id
        ):
            self._activity_started = False
