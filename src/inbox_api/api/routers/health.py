"""Health check endpoints."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel
import structlog

from ...core.config import Settings, get_settings, settings as app_settings

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/health", tags=["🏥 Health Monitoring"])


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
    timestamp: str
    version: str = app_settings.app_version
    environment: str = app_settings.environment


class ReadinessResponse(HealthResponse):
    """Readiness check response model."""
    checks: Dict[str, bool]


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/",
            response_model=HealthResponse,
            summary="💚 Basic Health Check",
            description="Quick liveness check for load balancers and monitoring.")
async def health_check() -> HealthResponse:
    """Basic health check endpoint.
    
    Returns:
        Health status information
    """
    return HealthResponse(
        status="healthy",
        service="inbox-api",
        timestamp=_utc_timestamp(),
    )


@router.get("/readiness",
            response_model=ReadinessResponse,
            summary="🔍 Readiness Check",
            description="""
**Reports whether the service can answer `/inbox` and `/domainList`.**

Checks local configuration only; the mailbox is not contacted.
- 📄 allow-list file exists
- 📫 mailbox host and credentials are set
- 🔑 shared secret is set
            """)
async def readiness_check(settings: Settings = Depends(get_settings)) -> ReadinessResponse:
    """Readiness check based on configuration.

    Args:
        settings: Application settings dependency

    Returns:
        Readiness status with per-check results
    """
    checks = {
        "domain_list_file": Path(settings.domain_list_file).is_file(),
        "mailbox_configured": settings.mailbox_configured,
        "key_configured": bool(settings.key),
    }
    is_ready = all(checks.values())
    if not is_ready:
        logger.warning("Service not ready", checks=checks)

    return ReadinessResponse(
        status="ready" if is_ready else "not_ready",
        service="inbox-api",
        timestamp=_utc_timestamp(),
        checks=checks,
    )
