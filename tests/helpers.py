"""
Shared builders and fakes for the test suite.
"""

import imaplib
import re
from typing import Dict, List, Optional

TEST_KEY = "test-key"


def build_message(
    to: str,
    subject: str = "Hello",
    date: str = "Mon, 1 Jan 2024 00:00:00 +0000",
    sender: str = "sender@example.org",
    queue_id: Optional[str] = "4F1B2C3D",
    content_type: Optional[str] = "text/plain; charset=utf-8",
    text: str = "Your code is 123456",
) -> bytes:
    """Build a raw CRLF message the way the relay delivers it."""
    lines = [
        "Return-Path: <%s>" % sender,
        "Received: from mx.example.org by mail.example.net",
    ]
    if queue_id is not None:
        lines.append(f"X-Rspamd-Queue-Id: {queue_id}")
    lines += [
        f"From: {sender}",
        f"To: {to}",
        f"Subject: {subject}",
        f"Date: {date}",
        "MIME-Version: 1.0",
    ]
    if content_type is not None:
        lines.append(f"Content-Type: {content_type}")
    return ("\r\n".join(lines) + "\r\n\r\n" + text + "\r\n").encode("utf-8")


class FakeIMAP:
    """In-memory stand-in for ``imaplib.IMAP4`` used through the factory hook.

    ``messages`` maps UID to raw message bytes. SEARCH reads the address from
    the pending ``literal``, as imaplib does, and matches the ``To:`` line
    exactly; FETCH returns FLAGS after the body literal for every other
    message, like servers do when the fetch itself sets ``\\Seen``.
    """

    def __init__(
        self,
        messages: Optional[Dict[str, bytes]] = None,
        login_ok: bool = True,
        fetch_error: Optional[Exception] = None,
    ):
        self.messages = messages or {}
        self.login_ok = login_ok
        self.fetch_error = fetch_error
        self.calls: List[tuple] = []
        self.literals: List[bytes] = []
        self.literal: Optional[bytes] = None
        self.logged_out = False

    def login(self, user, password):
        self.calls.append(("LOGIN", user))
        if not self.login_ok:
            raise imaplib.IMAP4.error("[AUTHENTICATIONFAILED] Invalid credentials")
        return "OK", [b"LOGIN completed"]

    def select(self, mailbox="INBOX", readonly=False):
        self.calls.append(("SELECT", mailbox, readonly))
        return "OK", [str(len(self.messages)).encode()]

    def uid(self, command, *args):
        self.calls.append((command,) + args)
        if command == "SEARCH":
            literal, self.literal = self.literal, None
            self.literals.append(literal)
            address = literal.decode("utf-8")
            matches = [
                uid for uid, raw in self.messages.items()
                if f"\r\nTo: {address}\r\n".encode() in raw
            ]
            return "OK", [" ".join(matches).encode()]
        if command == "FETCH":
            if self.fetch_error is not None:
                raise self.fetch_error
            data = []
            for seqno, uid in enumerate(args[0].split(","), 1):
                raw = self.messages[uid]
                if seqno % 2:
                    data.append((f"{seqno} (UID {uid} BODY[] {{{len(raw)}}}".encode(), raw))
                    data.append(b" FLAGS (\\Seen))")
                else:
                    data.append((f"{seqno} (UID {uid} FLAGS (\\Seen) BODY[] {{{len(raw)}}}".encode(), raw))
                    data.append(b")")
            return "OK", data
        return "BAD", [b"unsupported"]

    def logout(self):
        self.calls.append(("LOGOUT",))
        self.logged_out = True
        return "BYE", [b"Logging out"]

    @property
    def commands(self) -> List[str]:
        return [call[0] for call in self.calls]


class ScriptedIMAP(imaplib.IMAP4):
    """Real ``imaplib.IMAP4`` client wired to a scripted in-memory server.

    Only the socket hooks are replaced, so the bytes recorded in ``received``
    are exactly what imaplib would put on the wire: one entry per command,
    with any literal inlined after its ``{n}`` marker.
    """

    def __init__(self, search_result: bytes = b""):
        self.search_result = search_result
        self.received: List[bytes] = []
        self._replies: List[bytes] = []
        self._pending = b""
        self._inbound = b""
        self._literal_left = 0
        super().__init__("imap.test")

    def open(self, host="", port=imaplib.IMAP4_PORT, timeout=None):
        self.host = host
        self.port = port
        self._replies.append(b"* OK IMAP4rev1 ready\r\n")

    def readline(self):
        return self._replies.pop(0)

    def read(self, size):
        raise AssertionError("scripted server sends no literals")

    def shutdown(self):
        pass

    def send(self, data):
        self._pending += data
        while self._pending:
            if self._literal_left:
                chunk = self._pending[:self._literal_left]
                self._pending = self._pending[len(chunk):]
                self._inbound += chunk
                self._literal_left -= len(chunk)
                continue
            if b"\r\n" not in self._pending:
                break
            line, self._pending = self._pending.split(b"\r\n", 1)
            self._inbound += line
            size = re.search(rb"\{(\d+)\}$", line)
            if size:
                self._literal_left = int(size.group(1))
                self._replies.append(b"+ Ready for literal data\r\n")
                continue
            self._answer(self._inbound)
            self._inbound = b""

    def _answer(self, command: bytes) -> None:
        self.received.append(command)
        tag, _, rest = command.partition(b" ")
        words = rest.split(b" ")
        name = b" ".join(words[:2]) if words[0] == b"UID" else words[0]

        if name == b"CAPABILITY":
            self._replies.append(b"* CAPABILITY IMAP4rev1\r\n")
        elif name == b"SELECT":
            self._replies.append(b"* 0 EXISTS\r\n")
        elif name == b"UID SEARCH":
            result = b" " + self.search_result if self.search_result else b""
            self._replies.append(b"* SEARCH" + result + b"\r\n")
        elif name == b"LOGOUT":
            self._replies.append(b"* BYE Logging out\r\n")
        elif name != b"LOGIN":
            self._replies.append(tag + b" BAD Unexpected command\r\n")
            return
        self._replies.append(tag + b" OK Completed\r\n")
