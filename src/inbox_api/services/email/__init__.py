"""Email retrieval module.

- client: IMAP session management
- parser: header extraction, content trimming and date ordering
- service: per-request inbox retrieval

Example:
    from .service import InboxService

    service = InboxService(settings)
    response = await service.get_inbox("someone@example.com")
"""

from .client import IMAPClient, MailboxSession
from .parser import MailContentExtractor, MessageParser, MessageSorter
from .service import InboxService

__all__ = [
    "IMAPClient",
    "MailboxSession",
    "MailContentExtractor",
    "MessageParser",
    "MessageSorter",
    "InboxService",
]
