"""Application lifecycle management."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
import structlog

from .config import settings

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(
        "🚀 Starting Inbox API",
        version=settings.app_version,
        environment=settings.environment,
        host=settings.api_host,
        port=settings.api_port,
    )

    if not Path(settings.domain_list_file).is_file():
        logger.warning(
            "Domain allow-list file not found; /inbox and /domainList will fail",
            path=settings.domain_list_file,
        )
    if not settings.mailbox_configured:
        logger.warning("Mailbox credentials incomplete; set HOST, EMAIL and PASSWORD")
    if not settings.key:
        logger.warning("KEY is not set; every keyed request will be rejected")

    logger.info(f"Server listening on port {settings.api_port}")

    yield

    logger.info("🛑 Inbox API shutdown completed")
