"""Message and response models for the inbox endpoints."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class FetchedMessage(BaseModel):
    """A message pulled from the mailbox during a single request.

    ``body`` is the raw RFC 822 text; the header fields and ``mail_content``
    are derived from it by :mod:`inbox_api.services.email.parser`.
    """

    uid: str
    flags: List[str] = Field(default_factory=list)
    body: str = ""
    from_: str = ""
    to: str = ""
    subject: str = ""
    date: str = ""
    mail_content: str = ""


class MessageSummary(BaseModel):
    """A message as returned by ``GET /inbox``."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(default="", alias="from")
    to: str = ""
    subject: str = ""
    date: str = ""
    mail_content: str = Field(default="", alias="mailContent")


class InboxResponse(BaseModel):
    """Response body of ``GET /inbox``."""

    success: bool = True
    email: str
    messages: List[MessageSummary] = Field(default_factory=list)


class DomainListResponse(BaseModel):
    """Response body of ``GET /domainList``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    domain_list: List[str] = Field(default_factory=list, alias="domainList")


class ErrorResponse(BaseModel):
    """Client error body (401, 400)."""
    success: bool = False
    status: str = "error"
    message: str


class ServerErrorResponse(BaseModel):
    """Server error body (500)."""
    success: bool = False
    error: str
