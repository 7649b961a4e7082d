"""Health & Readiness Probes.

Invariants:
    - GET /health/ answers 200 whenever the process is up, without touching the database
    - GET /health/ready answers 503 when no gateway is attached or SELECT 1 fails
"""

import logging
import time

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from cattery.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "cattery-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": get_settings().environment,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness — the users/cats/posts store must answer."""
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        logger.warning("Readiness probe without a persistence gateway")
        return _not_ready("gateway_not_initialized")

    started = time.perf_counter()
    if not await gateway.health_check():
        return _not_ready("database_unavailable")
    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "latency_ms": latency_ms,
    }


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
