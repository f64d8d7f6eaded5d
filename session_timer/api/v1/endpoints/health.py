"""Health check endpoint for load balancers and monitoring."""

import os
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from session_timer.api.deps import get_runtime
from session_timer.db.session import get_db
from session_timer.services.runtime import SessionRuntime

router = APIRouter()


@router.get("")
async def health(runtime: SessionRuntime = Depends(get_runtime)):
    """Liveness plus ticker/coordinator status. Includes built_at if BACKEND_BUILT_AT env is set."""
    payload: dict = {
        "status": "ok",
        "ticking": runtime.ticker.is_ticking,
        "phase": runtime.coordinator.phase.value,
    }
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Readiness: app + DB connectivity."""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "database": str(e)},
        )
