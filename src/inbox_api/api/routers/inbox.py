"""Inbox lookup endpoint."""

import re
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query
import structlog

from ...core.exceptions import DomainNotAllowedError, InvalidEmailError
from ...models.inbox import ErrorResponse, InboxResponse, ServerErrorResponse
from ...services.domains import DomainAllowList
from ...services.email import InboxService
from ..dependencies import get_domain_allow_list, get_inbox_service, require_api_key

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["📬 Inbox"])

_LINE_BREAKS = re.compile(r"[\r\n\x00]")


def split_domain(email: Optional[str]) -> str:
    """Return the part after the first ``@``.

    Raises:
        InvalidEmailError: If ``email`` is missing, has no ``@`` or holds
            CR, LF or NUL
    """
    if not email or "@" not in email or _LINE_BREAKS.search(email):
        raise InvalidEmailError(email)
    return email.split("@")[1]


@router.get("/inbox",
            response_model=InboxResponse,
            summary="📬 Messages for a recipient",
            description="""
**Return the messages in the shared mailbox that were sent to `email`.**

- 🔑 `key` must match the configured shared secret
- 🌐 the domain of `email` must appear in the allow-list file
- 📨 messages are fetched (and marked seen), newest first
- ✂️ `mailContent` starts at the first `Content-Type:` after the relay queue-id header
            """,
            dependencies=[Depends(require_api_key)],
            responses={
                400: {"model": ErrorResponse, "description": "Domain not allowed or email malformed"},
                401: {"model": ErrorResponse, "description": "Key mismatch"},
                500: {"model": ServerErrorResponse, "description": "Mailbox or allow-list failure"},
            })
async def get_inbox(
    email: Optional[str] = Query(None, description="Recipient address"),
    allow_list: DomainAllowList = Depends(get_domain_allow_list),
    inbox_service: InboxService = Depends(get_inbox_service),
) -> InboxResponse:
    """Fetch the messages addressed to ``email``.

    Raises:
        InvalidEmailError: When ``email`` has no domain part
        DomainNotAllowedError: When the domain is not in the allow-list
        UpstreamProtocolError: When the mailbox cannot be queried
    """
    domain = split_domain(email)

    if not allow_list.is_allowed(domain):
        raise DomainNotAllowedError(domain, file_name=Path(allow_list.path).name)

    return await inbox_service.get_inbox(email)
