"""Print how many sessions are recorded and the most recent ones."""

import asyncio

from sqlalchemy import func, select

from session_timer.db.session import async_session_maker, engine
from session_timer.models.workout import Workout
from session_timer.services.time_format import format_elapsed


async def check_data():
    async with async_session_maker() as session:
        try:
            count = (await session.execute(select(func.count(Workout.id)))).scalar()
            print(f"Table 'workouts' row count: {count}")
            recent = await session.execute(
                select(Workout).order_by(Workout.started_at.desc()).limit(5)
            )
            for w in recent.scalars().all():
                duration = format_elapsed(w.duration_seconds) if w.duration_seconds is not None else "-"
                print(f"  {w.started_at:%Y-%m-%d %H:%M}  {duration:>8}  {w.name or '(unnamed)'}")
        except Exception as e:
            print(f"Error checking DB: {e}")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(check_data())
