"""Inbox retrieval service.

Ties together the IMAP session, header parsing, ordering and content
trimming behind one awaitable call per request.

Classes:
    InboxService: Fetch and format the messages addressed to one recipient
"""

import asyncio
from typing import List, Optional

import structlog

from ...core.config import Settings
from ...core.exceptions import ConfigurationError
from ...models.inbox import FetchedMessage, InboxResponse, MessageSummary
from .client import IMAPClient, ImapFactory
from .parser import MailContentExtractor, MessageSorter

logger = structlog.get_logger(__name__)


class InboxService:
    """Fetch messages for a recipient from the shared mailbox.

    Every call opens its own IMAP connection and closes it before returning.
    """

    def __init__(self, settings: Settings, imap_factory: Optional[ImapFactory] = None):
        self.settings = settings
        self.client = IMAPClient(settings, imap_factory=imap_factory)

    def _fetch_blocking(self, email: str) -> List[FetchedMessage]:
        with self.client.open_session() as session:
            uids = session.search_recipient(email)
            if not uids:
                return []
            return session.fetch(uids)

    async def fetch_messages(self, email: str) -> List[FetchedMessage]:
        """Fetch all messages addressed to ``email``.

        The IMAP exchange runs in a worker thread; the caller is suspended
        until it completes.

        Args:
            email: Recipient address, matched by the server's ``TO`` search

        Returns:
            Parsed messages in delivery order

        Raises:
            ConfigurationError: If no mailbox host is configured
            UpstreamProtocolError: If any IMAP step fails
        """
        if not self.settings.host:
            raise ConfigurationError("Mailbox host is not configured", config_key="HOST")

        logger.info("Fetching inbox", email=email, folder=self.settings.imap_folder)
        return await asyncio.to_thread(self._fetch_blocking, email)

    @staticmethod
    def to_summary(message: FetchedMessage) -> MessageSummary:
        """Convert a fetched message into its response form."""
        return MessageSummary(
            from_=message.from_,
            to=message.to,
            subject=message.subject,
            date=message.date,
            mail_content=MailContentExtractor.trim(message.mail_content),
        )

    async def get_inbox(self, email: str) -> InboxResponse:
        """Fetch, sort newest first and format the messages for ``email``."""
        messages = await self.fetch_messages(email)
        ordered = MessageSorter.sort_newest_first(messages)

        logger.info("Inbox fetched", email=email, message_count=len(ordered))
        return InboxResponse(
            email=email,
            messages=[self.to_summary(message) for message in ordered],
        )
