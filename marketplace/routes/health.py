"""
Local Marketplace Backend - Health Check Route
===============================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database. The database is the only
       critical dependency, so its state decides the overall status.
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from marketplace import __version__
from marketplace import database
from marketplace.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
