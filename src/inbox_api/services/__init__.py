"""Mailbox access and allow-list services.

This module contains:
- Inbox retrieval over IMAP (email/)
- Recipient domain allow-list (domains.py)
"""

from .domains import DomainAllowList
from .email import InboxService

__all__ = ["DomainAllowList", "InboxService"]
