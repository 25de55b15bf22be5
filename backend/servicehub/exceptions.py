"""
ServiceHub Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the standard failed envelope with the matching HTTP status.
Who:   Raised by services and the tenancy dependency; caught by global handlers.
When:  During request processing when recoverable errors occur.

Exception Hierarchy:
    ServiceHubError (base)
    ├── ValidationError          → 400 Bad Request (errors = per-field messages)
    ├── BusinessRuleError        → 400 Bad Request (domain conflict)
    ├── UnauthorizedError        → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

Note:
    A missing tenant context is NOT an exception. Services return a failed
    ApiResponse for it so list endpoints can answer with a normal envelope.
"""

from typing import Any, Dict, List, Optional


class ServiceHubError(Exception):
    """
    Base exception for all ServiceHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def errors(self) -> List[str]:
        """Messages placed in the envelope's `errors` list."""
        return []


class ValidationError(ServiceHubError):
    """
    Raised when client input fails validation.

    What:    One or more fields of a command are invalid.
    When:    The command validators in services/validators.py return messages.
    HTTP:    400 Bad Request

    Example response:
        {
            "success": false,
            "data": null,
            "message": "Validation failed",
            "errors": ["First name is required", "Email must be a valid address"]
        }
    """

    status_code = 400

    def __init__(
        self,
        messages: Optional[List[str]] = None,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.messages = list(messages or [])

    @property
    def errors(self) -> List[str]:
        return self.messages or [self.message]


class BusinessRuleError(ServiceHubError):
    """
    Raised when a well-formed command conflicts with current state.

    When:    Payment exceeds the invoice balance, invoicing a work order that is
             not completed, deleting a work order that already has an invoice.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

    @property
    def errors(self) -> List[str]:
        return [self.message]


class UnauthorizedError(ServiceHubError):
    """
    Raised when the caller carries no identity at all.

    HTTP:    401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ServiceHubError):
    """
    Raised when a requested resource does not exist in the caller's tenant.

    What:    The id is unknown, soft-deleted, or owned by another tenant.
             All three look identical to the client.
    HTTP:    404 Not Found

    Why a custom exception:
        SQLAlchemy returns None for missing records (not an exception).
        We convert None → NotFoundError in the service layer to keep
        HTTP concerns out of the service logic while still enabling
        the correct status code in the response.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class DatabaseError(ServiceHubError):
    """
    Raised when database operations fail unexpectedly.

    What:    A database query, insert, or update failed.
    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL query, constraint name, etc.) is logged
        server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An error occurred while processing your request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(ServiceHubError):
    """
    Raised when a caller exceeds the sliding-window request limit.

    HTTP:    429 Too Many Requests (with a Retry-After header)
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
