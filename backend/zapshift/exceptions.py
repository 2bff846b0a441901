"""
zapShift Backend — Custom Exception Hierarchy
===============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Each failure maps to exactly one HTTP status code and a user-safe
       message, without leaking driver or SDK details to the client.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and guards; caught by global handlers.

Exception Hierarchy:
    ZapShiftError (base)
    ├── InvalidRequestError          → 400 Bad Request (client can fix)
    ├── UnauthenticatedError         → 401 Unauthorized (no bearer token)
    ├── ForbiddenError               → 403 Forbidden (bad token, wrong role, other user)
    ├── NotFoundError                → 404 Not Found (zero documents matched)
    └── InternalError                → 500 Internal Server Error (generic message)
        ├── DatabaseError            → document store failure
        ├── PaymentServiceError      → Stripe failure
        └── ServiceNotConfiguredError → external service missing credentials
"""

from typing import Any, Dict, Optional


class ZapShiftError(Exception):
    """
    Base exception for all zapShift application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidRequestError(ZapShiftError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, malformed ObjectId, unknown enum value,
             non-positive amount.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthenticatedError(ZapShiftError):
    """
    Raised when a gated route is called without a usable bearer token.

    HTTP:    401 Unauthorized
    """

    status_code = 401
    error_code = "unauthenticated"

    def __init__(
        self,
        message: str = "Unauthorized access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(ZapShiftError):
    """
    Raised when the caller is identified but not allowed.

    When:    Token rejected by the identity provider, caller is not an admin,
             or caller asks for another user's payments.
    HTTP:    403 Forbidden
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Forbidden access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ZapShiftError):
    """
    Raised when a requested resource does not exist.

    When:    find_one returned None, or an update/delete matched zero documents.
    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource.capitalize()} not found"
            if resource_id:
                message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InternalError(ZapShiftError):
    """
    Raised for failures the client cannot fix.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The context
        (driver error type, collection name, processor error code) is logged
        server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(InternalError):
    """Raised when a document store operation fails (connectivity, driver exception)."""

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PaymentServiceError(InternalError):
    """Raised when the payment processor rejects or fails an intent request."""

    def __init__(
        self,
        message: str = "Failed to create payment intent",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ServiceNotConfiguredError(InternalError):
    """Raised when a route needs an external service whose credentials are missing."""

    def __init__(
        self,
        service: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["service"] = service
        super().__init__(message="Internal server error", context=ctx)
        self.service = service
