"""
Health check endpoint for monitoring and orchestration.

Reports uptime, database connectivity and the number of live cache entries.
Always answers 200 so probes see "degraded" rather than a failure.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from speednet.api.deps import get_session_cache
from speednet.core.cache import SessionCache
from speednet.core.db import get_db

router = APIRouter(tags=["health"])

# Set in lifespan
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    """Called by lifespan to track when app started."""
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """
    Check database connectivity.

    Returns: {"status": "ok"|"down", "response_time_ms": N, "error": str (if down)}
    """
    start = time.time()
    try:
        await db.execute(text("SELECT 1"))
        return {
            "status": "ok",
            "response_time_ms": int((time.time() - start) * 1000),
        }
    except Exception as e:
        return {
            "status": "down",
            "response_time_ms": int((time.time() - start) * 1000),
            "error": str(type(e).__name__),
        }


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check(
    db: AsyncSession = Depends(get_db),
    cache: SessionCache = Depends(get_session_cache),
) -> JSONResponse:
    """
    Example response (healthy):
        {
            "status": "ok",
            "uptime_seconds": 3600,
            "checks": {
                "database": {"status": "ok", "response_time_ms": 5},
                "cache": {"status": "ok", "entries": 12}
            }
        }
    """
    db_check = await check_database(db)
    overall_status = "ok" if db_check["status"] == "ok" else "degraded"

    return JSONResponse(
        content={
            "status": overall_status,
            "uptime_seconds": get_uptime_seconds(),
            "checks": {
                "database": db_check,
                "cache": {"status": "ok", "entries": len(cache)},
            },
        },
        status_code=status.HTTP_200_OK,
    )
