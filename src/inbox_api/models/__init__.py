"""Pydantic models for the Inbox API."""

from .inbox import (
    DomainListResponse,
    ErrorResponse,
    FetchedMessage,
    InboxResponse,
    MessageSummary,
    ServerErrorResponse,
)

__all__ = [
    "DomainListResponse",
    "ErrorResponse",
    "FetchedMessage",
    "InboxResponse",
    "MessageSummary",
    "ServerErrorResponse",
]
