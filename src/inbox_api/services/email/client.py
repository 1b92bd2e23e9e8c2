"""IMAP client for the shared mailbox.

This module owns the IMAP session of a single request: connect, login,
select the folder, search by recipient, fetch in one batch and log out.

Classes:
    IMAPClient: Opens authenticated sessions from the configured settings
    MailboxSession: Context manager around one selected-folder connection
"""

import imaplib
import re
import ssl
import time
from typing import Callable, Dict, List, Optional

import structlog

from ...core.config import Settings
from ...core.exceptions import UpstreamProtocolError
from ...core.logging import log_imap_operation
from ...models.inbox import FetchedMessage
from .parser import MessageParser

logger = structlog.get_logger(__name__)

ImapFactory = Callable[[], imaplib.IMAP4]

_FETCH_START = re.compile(rb"^(\d+) \(")
_UID = re.compile(rb"UID (\d+)")
_FLAGS = re.compile(rb"FLAGS \(([^)]*)\)")


def insecure_ssl_context() -> ssl.SSLContext:
    """TLS context that accepts any server certificate."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _default_imap_factory(settings: Settings) -> ImapFactory:
    def _factory() -> imaplib.IMAP4:
        if settings.tls:
            return imaplib.IMAP4_SSL(
                settings.host, settings.port, ssl_context=insecure_ssl_context()
            )
        return imaplib.IMAP4(settings.host, settings.port)

    return _factory


class _PendingMessage:
    """Attributes and body of one message, gathered until both are known."""

    def __init__(self, seqno: str):
        self.seqno = seqno
        self.attributes: Dict[str, object] = {}
        self.body: Optional[bytes] = None

    def add_attributes(self, data: bytes) -> None:
        uid_match = _UID.search(data)
        if uid_match:
            self.attributes["uid"] = uid_match.group(1).decode("ascii")
        flags_match = _FLAGS.search(data)
        if flags_match:
            self.attributes["flags"] = flags_match.group(1).decode("ascii", errors="replace").split()

    @property
    def is_complete(self) -> bool:
        return self.body is not None and "uid" in self.attributes

    def finalize(self) -> FetchedMessage:
        return MessageParser.parse(
            uid=self.attributes["uid"],
            flags=self.attributes.get("flags", []),
            raw=self.body,
        )


def collect_fetch_response(data: List[object]) -> List[FetchedMessage]:
    """Merge an imaplib ``UID FETCH`` response into messages.

    A message's attributes may arrive before its body literal, after it (for
    instance the ``\\Seen`` flag set by the fetch itself), or both. A message
    is only finalized once the next one starts or the response ends, and only
    when both its body and UID were seen.

    Args:
        data: Second element of ``IMAP4.uid("FETCH", ...)``

    Returns:
        Messages in the order the server delivered them
    """
    messages: List[FetchedMessage] = []
    pending: Optional[_PendingMessage] = None

    def finish(current: Optional[_PendingMessage]) -> None:
        if current is None:
            return
        if current.is_complete:
            messages.append(current.finalize())
        else:
            logger.debug(
                "Skipping fetch response without body or UID",
                seqno=current.seqno,
                attributes=current.attributes,
            )

    for item in data:
        if isinstance(item, tuple):
            envelope, literal = item[0], item[1]
        elif isinstance(item, bytes):
            envelope, literal = item, None
        else:
            continue

        start = _FETCH_START.match(envelope)
        if start:
            finish(pending)
            pending = _PendingMessage(start.group(1).decode("ascii"))
        if pending is None:
            continue

        pending.add_attributes(envelope)
        if literal is not None:
            pending.body = literal

    finish(pending)
    return messages


class MailboxSession:
    """One authenticated connection with the folder selected.

    Use as a context manager; the connection is logged out on exit whether
    or not the block raised.
    """

    def __init__(self, imap_conn: imaplib.IMAP4, host: str, folder: str = "INBOX"):
        self._imap = imap_conn
        self.host = host
        self.folder = folder

    def __enter__(self) -> "MailboxSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _check(self, operation: str, typ: str, data: List[object], started: float) -> None:
        duration_ms = round((time.time() - started) * 1000, 2)
        if typ != "OK":
            detail = data[0].decode("utf-8", errors="replace") if data and isinstance(data[0], bytes) else typ
            log_imap_operation(logger, operation, self.host, duration_ms, False, response=detail)
            raise UpstreamProtocolError(f"IMAP {operation} failed: {detail}", operation=operation)
        log_imap_operation(logger, operation, self.host, duration_ms, True)

    def select(self) -> None:
        """Select the folder read-write so fetched messages can be marked seen."""
        started = time.time()
        try:
            typ, data = self._imap.select(self.folder, readonly=False)
        except (imaplib.IMAP4.error, OSError) as e:
            raise UpstreamProtocolError(str(e), operation="select") from e
        self._check("select", typ, data, started)

    def search_recipient(self, email: str) -> List[str]:
        """Return UIDs of all messages whose To header matches ``email``.

        The address goes out as a UTF-8 literal, so it never ends the
        command line early and may hold non-ASCII characters.
        """
        started = time.time()
        self._imap.literal = email.encode("utf-8")
        try:
            typ, data = self._imap.uid("SEARCH", "CHARSET", "UTF-8", "ALL", "TO")
        except (imaplib.IMAP4.error, OSError) as e:
            raise UpstreamProtocolError(str(e), operation="search") from e
        finally:
            self._imap.literal = None
        self._check("search", typ, data, started)

        raw = data[0] if data and data[0] else b""
        uids = [uid.decode("ascii") for uid in raw.split()]
        logger.info("Recipient search completed", email=email, matches=len(uids))
        return uids

    def fetch(self, uids: List[str]) -> List[FetchedMessage]:
        """Fetch full bodies and attributes of ``uids`` in one batch.

        ``BODY[]`` (not ``BODY.PEEK[]``) is requested, so the server marks
        the messages ``\\Seen``.
        """
        if not uids:
            return []

        started = time.time()
        try:
            typ, data = self._imap.uid("FETCH", ",".join(uids), "(UID FLAGS BODY[])")
        except (imaplib.IMAP4.error, OSError) as e:
            logger.error("IMAP fetch failed", error=str(e), uid_count=len(uids))
            raise UpstreamProtocolError(str(e), operation="fetch") from e
        self._check("fetch", typ, data, started)

        messages = collect_fetch_response(data)
        logger.info("Messages fetched", requested=len(uids), received=len(messages))
        return messages

    def close(self) -> None:
        """Log out, keeping any error out of the caller's way."""
        try:
            self._imap.logout()
        except (imaplib.IMAP4.error, OSError) as e:
            logger.warning("IMAP logout failed", host=self.host, error=str(e))


class IMAPClient:
    """Opens sessions against the configured single-account mailbox."""

    def __init__(self, settings: Settings, imap_factory: Optional[ImapFactory] = None):
        self.settings = settings
        self._imap_factory = imap_factory or _default_imap_factory(settings)

    def open_session(self) -> MailboxSession:
        """Connect, authenticate and select the folder.

        Returns:
            MailboxSession ready for search and fetch

        Raises:
            UpstreamProtocolError: If connecting, login or select fails
        """
        started = time.time()
        try:
            imap_conn = self._imap_factory()
        except (imaplib.IMAP4.error, OSError) as e:
            logger.error(
                "IMAP connection failed",
                host=self.settings.host,
                port=self.settings.port,
                tls=self.settings.tls,
                error=str(e),
            )
            raise UpstreamProtocolError(str(e), operation="connect") from e

        session = MailboxSession(imap_conn, self.settings.host, self.settings.imap_folder)
        try:
            try:
                typ, data = imap_conn.login(self.settings.email, self.settings.password)
            except (imaplib.IMAP4.error, OSError) as e:
                logger.error(
                    "IMAP login failed",
                    host=self.settings.host,
                    user=self.settings.email,
                    error=str(e),
                )
                raise UpstreamProtocolError(str(e), operation="login") from e
            session._check("login", typ, data, started)
            session.select()
        except BaseException:
            session.close()
            raise

        logger.info(
            "IMAP session established",
            host=self.settings.host,
            user=self.settings.email,
            folder=self.settings.imap_folder,
        )
        return session
