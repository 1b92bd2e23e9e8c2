"""FastAPI middleware configuration."""

import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import structlog

from .config import settings
from .logging import log_request_response

logger = structlog.get_logger(__name__)


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware."""
    if settings.cors_origins != "*":
        origins = [origin.strip() for origin in settings.cors_origins.split(",")]
    else:
        origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    
    logger.info("CORS middleware configured", allowed_origins=origins[:3] if len(origins) > 3 else origins)


def add_custom_middleware(app: FastAPI) -> None:
    """Add custom middleware to the application."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Access log for every request, tagged with a request id."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start_time = time.time()

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            logger.debug(
                "Request started",
                method=request.method,
                path=request.url.path,
            )

            response = await call_next(request)

            process_time = time.time() - start_time
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = str(process_time)

            # The query string carries the shared secret; log the path only
            log_request_response(
                logger,
                request_id=request_id,
                method=request.method,
                url=request.url.path,
                status_code=response.status_code,
                duration_ms=round(process_time * 1000, 2),
                client_ip=request.client.host if request.client else None,
                user_agent=request.headers.get("user-agent"),
            )
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

    logger.info("Custom middleware configured")


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application."""
    configure_cors(app)
    add_custom_middleware(app)
