"""Application constants."""

# Workout notification (same identifier = update in place)
WORKOUT_NOTIFICATION_ID = "workout-notification"
WORKOUT_NOTIFICATION_CATEGORY = "workout-active"
WORKOUT_SESSION_SCREEN = "workout-session"

PAUSED_STATUS = "⏸️"
RUNNING_STATUS = "▶️"

# Live activity
LIVE_ACTIVITY_DISMISSAL_POLICY = "default"  # OS removes the ended activity after a while

# Recorded workouts
MAX_WORKOUT_NAME_LENGTH = 255

# Active timer kept across restarts (single row)
TIMER_STORAGE_KEY = "workout-timer-storage"
