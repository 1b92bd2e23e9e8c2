"""Custom exceptions for the Inbox API."""

from typing import Any, Dict


class InboxAPIError(Exception):
    """Base exception for request-terminating errors."""

    status_code: int = 500

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        """Render the JSON body returned to the caller.

        Client errors carry a human readable ``message``; server errors expose
        the underlying ``error`` text as-is.
        """
        if self.status_code >= 500:
            return {"success": False, "error": self.message}
        return {"success": False, "status": "error", "message": self.message}


class ConfigurationError(InboxAPIError):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, config_key: str = None):
        super().__init__(message, error_code="CONFIGURATION_ERROR")
        self.config_key = config_key


class AuthorizationError(InboxAPIError):
    """Raised when the shared secret in ``?key=`` does not match."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", resource: str = None):
        super().__init__(
            message,
            error_code="AUTHORIZATION_ERROR",
            details={"resource": resource}
        )
        self.resource = resource


class InvalidEmailError(InboxAPIError):
    """Raised when the requested address is missing or has no domain part."""

    status_code = 400

    def __init__(self, email: str = None):
        super().__init__(
            "Query parameter email must be an address of the form user@domain",
            error_code="INVALID_EMAIL",
            details={"email": email}
        )
        self.email = email


class DomainNotAllowedError(InboxAPIError):
    """Raised when the recipient domain is not on the allow-list."""

    status_code = 400

    def __init__(self, domain: str, file_name: str = "domainlist.txt"):
        super().__init__(
            f"Domain {domain} not found on {file_name}, "
            f"check /domainList?key=key for available domain",
            error_code="DOMAIN_NOT_ALLOWED",
            details={"domain": domain}
        )
        self.domain = domain


class FileReadError(InboxAPIError):
    """Raised when the allow-list file cannot be read."""

    def __init__(self, message: str, path: str = None):
        super().__init__(
            message,
            error_code="FILE_READ_ERROR",
            details={"path": path}
        )
        self.path = path


class UpstreamProtocolError(InboxAPIError):
    """Raised for IMAP connection, login, select, search or fetch failures."""

    def __init__(self, message: str, operation: str = None):
        super().__init__(
            message,
            error_code="UPSTREAM_PROTOCOL_ERROR",
            details={"operation": operation}
        )
        self.operation = operation
