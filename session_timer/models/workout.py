"""Recorded workout sessions."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from session_timer.core.constants import MAX_WORKOUT_NAME_LENGTH
from session_timer.db.base import Base


class Workout(Base):
    """A completed timer session (written when the workout is stopped)."""

    __tablename__ = "workouts"
    __table_args__ = (Index("ix_workouts_started_at", "started_at"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str | None] = mapped_column(String(MAX_WORKOUT_NAME_LENGTH), nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Active time, pauses excluded
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    intensity: Mapped[str | None] = mapped_column(String(20), nullable=True)  # light, moderate, vigorous
