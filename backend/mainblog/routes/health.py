"""
Main Blog Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and container probes.
How:   Runs SELECT 1 against the database and reports the result with uptime.
Who:   Called by Docker health checks, load balancers and monitoring.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable
The endpoint itself always answers 200 so that the body can be inspected.
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from mainblog import __version__
from mainblog.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        from mainblog.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
