"""Core configuration and settings."""

from .config import Settings, get_settings, settings
from .exceptions import ConfigurationError, InboxAPIError
from .logging import setup_logging

__all__ = ["Settings", "get_settings", "settings", "ConfigurationError", "InboxAPIError", "setup_logging"]
