"""Parsing of raw message text into the fields returned by ``/inbox``.

Header extraction works on the raw RFC 822 text with line-anchored regular
expressions. Folded headers are not reconstructed and only the first match
of each header is used.

Classes:
    MessageParser: Extract From/To/Subject/Date and the content fragment
    MailContentExtractor: Locate and trim the content fragment
    MessageSorter: Order parsed messages newest first
"""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, List, Optional

import structlog

from ...models.inbox import FetchedMessage

logger = structlog.get_logger(__name__)

# Header inserted by the Rspamd relay; used only as a text anchor
QUEUE_ID_MARKER = "X-Rspamd-Queue-Id:"
CONTENT_TYPE_MARKER = "Content-Type:"
NOT_AVAILABLE = "N/A"

HEADER_PATTERNS: Dict[str, "re.Pattern[str]"] = {
    "from_": re.compile(r"^From: (.*)$", re.MULTILINE),
    "to": re.compile(r"^To: (.*)$", re.MULTILINE),
    "subject": re.compile(r"^Subject: (.*)$", re.MULTILINE),
    "date": re.compile(r"^Date: (.*)$", re.MULTILINE),
}


class MessageParser:
    """Parser for raw message text."""

    @staticmethod
    def parse_headers(body: str) -> Dict[str, str]:
        """Extract the selected headers from raw message text.

        Args:
            body: Raw message text (headers and body)

        Returns:
            Dict with ``from_``, ``to``, ``subject`` and ``date``; a header
            that is absent maps to an empty string
        """
        headers = {}
        for field, pattern in HEADER_PATTERNS.items():
            match = pattern.search(body)
            headers[field] = match.group(1).strip() if match else ""
        return headers

    @staticmethod
    def parse(uid: str, flags: List[str], raw: bytes) -> FetchedMessage:
        """Build a :class:`FetchedMessage` from one fetched message.

        Args:
            uid: Message UID
            flags: IMAP flags reported with the message
            raw: Raw ``BODY[]`` bytes

        Returns:
            FetchedMessage with header fields and the untrimmed content fragment
        """
        body = raw.decode("utf-8", errors="replace")
        headers = MessageParser.parse_headers(body)

        logger.debug(
            "Parsed message headers",
            uid=uid,
            found_headers=[k for k, v in headers.items() if v],
        )

        return FetchedMessage(
            uid=uid,
            flags=flags,
            body=body,
            mail_content=MailContentExtractor.extract(body),
            **headers,
        )


class MailContentExtractor:
    """Locate the content fragment that follows the relay queue-id header."""

    @staticmethod
    def extract(body: str) -> str:
        """Return everything from the queue-id marker to the end, or ``""``."""
        index = body.find(QUEUE_ID_MARKER)
        if index == -1:
            return ""
        return body[index:]

    @staticmethod
    def trim(mail_content: str) -> str:
        """Reduce an extracted fragment to the part shown to the caller.

        The marker's own line is removed, then only the text from the first
        ``Content-Type:`` onward is kept.

        Args:
            mail_content: Fragment produced by :meth:`extract`

        Returns:
            ``""`` for an empty fragment, the text starting at
            ``Content-Type:``, or ``"N/A"`` when no such header follows
        """
        if not mail_content:
            return ""

        index = mail_content.find(QUEUE_ID_MARKER)
        if index != -1:
            line_end = mail_content.find("\n", index)
            cut = line_end + 1 if line_end != -1 else len(mail_content)
            mail_content = mail_content[:index] + mail_content[cut:]

        content_type_index = mail_content.find(CONTENT_TYPE_MARKER)
        if content_type_index == -1:
            return NOT_AVAILABLE
        return mail_content[content_type_index:]


class MessageSorter:
    """Order messages by their Date header."""

    @staticmethod
    def parse_date(value: str) -> Optional[datetime]:
        """Parse an RFC 2822 or ISO 8601 date.

        Naive values are taken as UTC. Returns None when the value cannot be
        parsed.
        """
        if not value:
            return None

        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            parsed = None

        if parsed is None:
            try:
                parsed = datetime.fromisoformat(value)
            except ValueError:
                return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @staticmethod
    def sort_newest_first(messages: List[FetchedMessage]) -> List[FetchedMessage]:
        """Sort by descending date.

        Messages with an unparseable date go last and keep their fetch order.
        """
        def sort_key(message: FetchedMessage):
            parsed = MessageSorter.parse_date(message.date)
            if parsed is None:
                return (False, 0.0)
            return (True, parsed.timestamp())

        return sorted(messages, key=sort_key, reverse=True)
