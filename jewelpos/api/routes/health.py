"""
Health check endpoints.
"""

import time

import aiosqlite
from fastapi import APIRouter

from jewelpos.application.dto.responses import HealthResponse
from jewelpos.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns uptime and whether SQLite answers a trivial query.
    """
    from jewelpos.infrastructure.storage.sqlite import get_pool

    database = "ok"
    try:
        pool = await get_pool()
        if not await pool.ping():
            database = "error"
    except (aiosqlite.Error, OSError) as e:
        logger.warning("health_database_unreachable", error=str(e))
        database = "error"

    return HealthResponse(
        status="healthy" if database == "ok" else "unhealthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        database=database,
    )
