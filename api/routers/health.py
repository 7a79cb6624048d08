"""
Health check endpoints.

Provides basic, liveness, readiness and detailed health checks.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_database
from api.schemas.common import (
    HealthStatus,
    HealthCheckResponse,
    DetailedHealthCheckResponse,
    ComponentHealth,
)
from core.config import get_settings, Settings
from database import Database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

# Track application start time for uptime calculation
_start_time = time.time()


async def check_database(db: Database) -> ComponentHealth:
    """Ping the database and report latency or the failure."""
    try:
        latency_ms = await db.ping()
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return ComponentHealth(status=HealthStatus.UNHEALTHY, error=str(e))
    return ComponentHealth(status=HealthStatus.HEALTHY, latency_ms=round(latency_ms, 2))


@router.get(
    "",
    response_model=HealthCheckResponse,
    summary="Basic health check",
    description="Quick health check endpoint for load balancers and container orchestration.",
)
async def health_check() -> HealthCheckResponse:
    """
    Basic health check.

    Returns a simple healthy status if the API is running.
    """
    return HealthCheckResponse(
        status=HealthStatus.HEALTHY,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/detailed",
    response_model=DetailedHealthCheckResponse,
    summary="Detailed health check",
    description="Comprehensive health check with status of all components.",
)
async def detailed_health_check(
    settings: Settings = Depends(get_settings),
    db: Database = Depends(get_database),
) -> DetailedHealthCheckResponse:
    """
    Detailed health check with component status.

    Checks the health of the database connection.
    """
    components = {"database": await check_database(db)}
    overall_status = components["database"].status

    # Calculate uptime
    uptime_seconds = time.time() - _start_time

    return DetailedHealthCheckResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        environment=settings.environment,
        uptime_seconds=round(uptime_seconds, 2),
        components=components,
    )


@router.get(
    "/ready",
    response_model=HealthCheckResponse,
    summary="Readiness check",
    description="Check if the application is ready to accept traffic.",
)
async def readiness_check(
    response: Response,
    db: Database = Depends(get_database),
) -> HealthCheckResponse:
    """
    Readiness check for Kubernetes.

    Verifies that the database answers; 503 when it does not.
    """
    database = await check_database(db)
    if database.status != HealthStatus.HEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthCheckResponse(
        status=database.status,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/live",
    response_model=HealthCheckResponse,
    summary="Liveness check",
    description="Check if the application is alive.",
)
async def liveness_check() -> HealthCheckResponse:
    """
    Liveness check for Kubernetes.

    Simple check that the application process is running.
    """
    return HealthCheckResponse(
        status=HealthStatus.HEALTHY,
        timestamp=datetime.now(timezone.utc),
    )
