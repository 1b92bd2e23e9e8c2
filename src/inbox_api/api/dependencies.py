"""Shared FastAPI dependencies."""

import hmac
from typing import Optional

from fastapi import Depends, Query, Request

from ..core.config import Settings, get_settings
from ..core.exceptions import AuthorizationError
from ..services.domains import DomainAllowList
from ..services.email import InboxService


def verify_api_key(key: Optional[str], expected: Optional[str]) -> bool:
    """Compare the supplied key against the configured secret.

    An unset secret never matches.
    """
    if not expected or key is None:
        return False
    return hmac.compare_digest(key.encode("utf-8"), expected.encode("utf-8"))


async def require_api_key(
    request: Request,
    key: Optional[str] = Query(None, description="Shared secret"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request with 401 unless ``?key=`` matches."""
    if not verify_api_key(key, settings.key):
        raise AuthorizationError(resource=request.url.path)


def get_domain_allow_list(settings: Settings = Depends(get_settings)) -> DomainAllowList:
    """Get domain allow-list dependency."""
    return DomainAllowList(settings.domain_list_file)


def get_inbox_service(settings: Settings = Depends(get_settings)) -> InboxService:
    """Get inbox service dependency."""
    return InboxService(settings)
