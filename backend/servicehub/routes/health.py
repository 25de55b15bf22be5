"""
ServiceHub Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database.

Status levels:
    healthy:   database reachable (HTTP 200)
    degraded:  database unreachable (HTTP 503, stop routing traffic)
"""

import logging

from fastapi import APIRouter, Response
from sqlalchemy import text

from servicehub import __version__
from servicehub.database import engine
from servicehub.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "degraded"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(status=overall, database=db_status, version=__version__)
