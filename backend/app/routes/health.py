"""
Ledgerline Backend — Health Check Route
=========================================

What:  GET /health for monitoring and load balancer probes.
How:   Sends `SELECT 1` through the gateway.

Responses:
    200 {"status": "ok", "version": ..., "uptime_seconds": ...}
    500 {"error": "DB connection failed"}
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app import __version__
from app.database import Gateway, get_gateway
from app.exceptions import StoreError
from app.schemas.common import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"description": "Database unreachable", "model": ErrorResponse}},
    summary="Service health check",
)
async def health_check(gateway: Gateway = Depends(get_gateway)):
    try:
        await gateway.ping()
    except StoreError as e:
        logger.warning("Health check: database unreachable: %s", e.context.get("detail", e.message))
        return JSONResponse(status_code=500, content={"error": "DB connection failed"})

    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
