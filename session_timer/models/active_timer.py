"""The running workout's timer, kept so it survives a restart."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from session_timer.core.constants import MAX_WORKOUT_NAME_LENGTH
from session_timer.db.base import Base


class ActiveTimer(Base):
    """One row per storage key; deleted when the workout is completed."""

    __tablename__ = "active_timers"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    workout_id: Mapped[str] = mapped_column(String(64))
    workout_name: Mapped[str | None] = mapped_column(String(MAX_WORKOUT_NAME_LENGTH), nullable=True)
    is_running: Mapped[bool] = mapped_column(Boolean, default=True)
    time_elapsed_seconds: Mapped[int] = mapped_column(Integer, default=0)
    workout_start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)  # Shifted by pauses
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_pause_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
