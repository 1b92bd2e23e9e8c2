"""Inbox API - read a shared mailbox by recipient over HTTP."""

__version__ = "0.1.0"

from .core.config import settings

__all__ = ["settings"]
