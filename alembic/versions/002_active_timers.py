"""Active timer storage so a running workout survives a restart.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "active_timers",
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("workout_id", sa.String(length=64), nullable=False),
        sa.Column("workout_name", sa.String(length=255), nullable=True),
        sa.Column("is_running", sa.Boolean(), nullable=False),
        sa.Column("time_elapsed_seconds", sa.Integer(), nullable=False),
        sa.Column("workout_start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_pause_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_active_timers")),
    )


def downgrade() -> None:
    op.drop_table("active_timers")
