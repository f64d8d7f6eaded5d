"""Shared enums for the timer services and API."""

from enum import Enum


class AppLifecycleState(str, Enum):
    """Host app lifecycle as reported by the client."""

    FOREGROUND = "foreground"
    BACKGROUND = "background"
    INACTIVE = "inactive"  # Transitional (app switcher, incoming call)


class CoordinatorPhase(str, Enum):
    """Which surfaces should be live for the current workout."""

    IDLE = "idle"
    ACTIVE_FOREGROUND = "active_foreground"
    ACTIVE_BACKGROUND = "active_background"


class NotificationAction(str, Enum):
    """Action identifiers delivered with a notification response."""

    PAUSE = "pause"
    RESUME = "resume"
    DEFAULT = "default"  # User tapped the notification body


class WorkoutIntensity(str, Enum):
    """Self-reported intensity of a recorded workout."""

    LIGHT = "light"
    MODERATE = "moderate"
    VIGOROUS = "vigorous"
