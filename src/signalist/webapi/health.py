"""Health check endpoints for the Signalist API."""

import platform
import time
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..config.logging import get_logger
from ..config.settings import Settings
from ..core.context import AppContext
from .dependencies import get_context
from .models.requests import HealthCheckRequest
from .models.responses import HealthResponse, HealthStatus

logger = get_logger(__name__)
router = APIRouter()

# Track application start time for uptime calculation
_app_start_time = time.time()


def check_configuration_health(settings: Settings) -> Dict[str, Any]:
    """Check which integrations are configured."""
    checks = {
        "auth_token_configured": bool(settings.endpoint_auth_token),
    }
    optional_checks = {
        "market_data_configured": settings.is_market_data_configured(),
        "email_configured": settings.is_email_configured(),
    }

    if not all(checks.values()):
        status = "unhealthy"
    elif not all(optional_checks.values()):
        status = "degraded"
    else:
        status = "healthy"

    return {
        "status": status,
        "checks": {**checks, **optional_checks},
        "required_checks_passed": all(checks.values()),
        "optional_checks_passed": all(optional_checks.values()),
    }


def _overall(statuses) -> str:
    statuses = list(statuses)
    if "unhealthy" in statuses:
        return "unhealthy"
    if "degraded" in statuses:
        return "degraded"
    return "healthy"


@router.get("/health", response_model=HealthResponse, summary="Basic Health Check")
async def basic_health_check(context: AppContext = Depends(get_context)):
    """
    Perform a basic health check.

    Reports database connectivity and application uptime.
    """
    db_health = context.database.check_health()

    health_status = HealthStatus(
        status=_overall([db_health["status"]]),
        services={"database": db_health},
        uptime_seconds=time.time() - _app_start_time,
        version=context.settings.app_version,
    )

    logger.debug("Basic health check completed", status=health_status.status)
    return HealthResponse(success=True, health=health_status)


@router.post(
    "/health/detailed", response_model=HealthResponse, summary="Detailed Health Check"
)
async def detailed_health_check(
    request: HealthCheckRequest, context: AppContext = Depends(get_context)
):
    """Health check including configuration and platform details."""
    services: Dict[str, Dict[str, Any]] = {
        "configuration": check_configuration_health(context.settings),
        "platform": {
            "status": "healthy",
            "platform": platform.platform(),
            "python_version": platform.python_version(),
        },
    }
    if request.include_services:
        services["database"] = context.database.check_health()

    health_status = HealthStatus(
        status=_overall(s.get("status", "unknown") for s in services.values()),
        services=services,
        uptime_seconds=time.time() - _app_start_time,
        version=context.settings.app_version,
    )

    logger.info(
        "Detailed health check completed",
        status=health_status.status,
        services_checked=len(services),
    )
    return HealthResponse(success=True, health=health_status)


@router.get("/health/live", summary="Liveness Probe")
async def liveness_probe():
    """Returns 200 while the process can serve requests."""
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "uptime_seconds": time.time() - _app_start_time,
    }
