"""API routers for the Inbox API."""

from . import domains, health, inbox

__all__ = ["domains", "health", "inbox"]
