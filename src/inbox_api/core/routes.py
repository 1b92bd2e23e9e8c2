"""Router configuration and registration."""

from fastapi import FastAPI
import structlog

from ..api.routers import domains, health, inbox

logger = structlog.get_logger(__name__)


def configure_routes(app: FastAPI) -> None:
    """Configure all routes for the application."""
    app.include_router(health.router)
    app.include_router(inbox.router)
    app.include_router(domains.router)

    logger.info("Routes configured", routes=["health", "inbox", "domainList"])
