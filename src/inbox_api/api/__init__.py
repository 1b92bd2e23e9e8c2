"""FastAPI route handlers and dependencies."""

from .routers import domains, health, inbox

__all__ = ["domains", "health", "inbox"]
