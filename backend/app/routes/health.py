"""
Product API Backend: Health Check Route
========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the product store and reports the result.
Who:   Called by container health checks and uptime monitors.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (the API still answers; every store
                 operation would fail with a 500)

Not part of the published product API description.
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.product import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Module-level: initialized once when the module loads
_start_time = time.time()


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
async def health_check() -> HealthResponse:
    """Probe the database with a lightweight query and report uptime."""
    db_status = "connected"
    overall = "healthy"

    try:
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
