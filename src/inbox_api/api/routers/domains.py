"""Domain allow-list endpoint."""

from fastapi import APIRouter, Depends
import structlog

from ...models.inbox import DomainListResponse, ErrorResponse, ServerErrorResponse
from ...services.domains import DomainAllowList
from ..dependencies import get_domain_allow_list, require_api_key

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["🌐 Domains"])


@router.get("/domainList",
            response_model=DomainListResponse,
            summary="🌐 Permitted recipient domains",
            dependencies=[Depends(require_api_key)],
            responses={
                401: {"model": ErrorResponse, "description": "Key mismatch"},
                500: {"model": ServerErrorResponse, "description": "Allow-list unreadable"},
            })
async def get_domain_list(
    allow_list: DomainAllowList = Depends(get_domain_allow_list),
) -> DomainListResponse:
    """List the domains ``/inbox`` accepts."""
    domains = allow_list.list_domains()
    logger.debug("Domain list served", count=len(domains))
    return DomainListResponse(domain_list=domains)
