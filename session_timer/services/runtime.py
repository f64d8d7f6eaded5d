"""Wires the timer store, ticker, surfaces and coordinator once per application."""

from __future__ import annotations

from dataclasses import dataclass

from session_timer.core.config import Settings
from session_timer.core.enums import AppLifecycleState
from session_timer.services.coordinator import WorkoutSessionCoordinator, resolve_capabilities
from session_timer.services.live_activity import InMemoryActivityModule, LiveActivityService
from session_timer.services.navigation import Navigator
from session_timer.services.notifications import NotificationService
from session_timer.services.ticker import TimerTicker
from session_timer.services.timer_storage import TimerPersister, TimerStorage
from session_timer.services.timer_store import Clock, TimerStore, utc_now


@dataclass
class SessionRuntime:
    store: TimerStore
    ticker: TimerTicker
    notifications: NotificationService
    live_activity: LiveActivityService
    activity_module: InMemoryActivityModule | None
    navigator: Navigator
    coordinator: WorkoutSessionCoordinator
    persister: TimerPersister | None = None

    async def start(self) -> None:
        """Restore a saved workout first so the surfaces and the ticker pick it up."""
        if self.persister is not None:
            await self.persister.restore()
            self.persister.start()
        self.coordinator.start()
        self.ticker.start()

    async def aclose(self) -> None:
        await self.ticker.aclose()
        await self.coordinator.aclose()
        if self.persister is not None:
            await self.persister.aclose()


def build_runtime(
    settings: Settings, clock: Clock = utc_now, storage: TimerStorage | None = None
) -> SessionRuntime:
    """
    Build the collaborators once; the live-activity module only exists where enabled.
    With a storage the active workout is saved on every change and restored by start().
    """
    store = TimerStore(clock=clock)
    activity_module = InMemoryActivityModule() if settings.live_activity_enabled else None
    live_activity = LiveActivityService(activity_module)
    notifications = NotificationService(heading=settings.notification_title)
    navigator = Navigator(initial_route=settings.initial_route)
    capabilities = resolve_capabilities(live_activity, enabled=settings.live_activity_enabled)
    coordinator = WorkoutSessionCoordinator(
        store,
        notifications,
        live_activity,
        navigator,
        capabilities,
        workout_route=settings.workout_session_route,
        initial_app_state=AppLifecycleState.FOREGROUND,
    )
    return SessionRuntime(
        store=store,
        ticker=TimerTicker(store, interval_seconds=settings.tick_interval_seconds),
        notifications=notifications,
        live_activity=live_activity,
        activity_module=activity_module,
        navigator=navigator,
        coordinator=coordinator,
        persister=TimerPersister(store, storage) if storage is not None else None,
    )
