"""Main FastAPI application entry point."""

from typing import Any, Dict

from fastapi import FastAPI
import structlog

from .core.config import settings
from .core.logging import setup_logging, configure_uvicorn_logging
from .core.lifespan import lifespan
from .core.middleware import configure_middleware
from .core.handlers import configure_exception_handlers
from .core.routes import configure_routes

# Setup logging
setup_logging()
logger = structlog.get_logger(__name__)


app = FastAPI(
    title=settings.app_name,
    description="📬 Read the shared mailbox by recipient address",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "development" or settings.debug else None,
    redoc_url="/redoc" if settings.environment == "development" or settings.debug else None,
)

configure_middleware(app)
configure_exception_handlers(app)
configure_routes(app)


@app.get("/", response_model=Dict[str, Any])
async def root() -> Dict[str, Any]:
    """🏠 Root endpoint with service information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "running",
        "endpoints": {
            "inbox": "/inbox?key=<key>&email=<address>",
            "domain_list": "/domainList?key=<key>",
            "health": "/health/",
            "readiness": "/health/readiness",
            "docs": "/docs" if settings.environment == "development" or settings.debug else "disabled",
        },
    }


def run() -> None:
    """Serve the application with uvicorn on API_HOST:API_PORT."""
    import uvicorn

    logger.info(
        "🚀 Starting Inbox API from main",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.reload,
    )

    uvicorn.run(
        "inbox_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
        log_config=configure_uvicorn_logging(),
        access_log=False,
    )


if __name__ == "__main__":
    run()
