"""
Murmur Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the different failure scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": message}` with the matching HTTP status code.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    MurmurError (base)
    ├── ValidationError          → 400 Bad Request
    ├── ConflictError            → 400 Bad Request (duplicate like/follow)
    ├── AuthenticationError      → 401 Unauthorized
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class MurmurError(Exception):
    """
    Base exception for all Murmur application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MurmurError):
    """
    Raised when client input fails a business rule.

    When:    Missing post content, missing ids in a JSON body, oversize upload.
    HTTP:    400 Bad Request

    Schema-level problems (malformed JSON) are raised by FastAPI as
    RequestValidationError and mapped to the same 400 response in main.py.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(ValidationError):
    """
    Raised when the request would duplicate an existing relationship.

    When:    Liking a post twice, following the same user twice.
    HTTP:    400 Bad Request
    """


class AuthenticationError(MurmurError):
    """
    Raised when the bearer token is missing, malformed or expired.

    HTTP:    401 Unauthorized (with `WWW-Authenticate: Bearer`)
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Not authenticated",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(MurmurError):
    """
    Raised when an authenticated caller acts on a resource they do not own.

    When:    Deleting another user's post or comment.
    HTTP:    403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(MurmurError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records (not an exception); services
    convert None into NotFoundError so the route layer stays free of status
    code handling. Malformed ids are reported the same way.

    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(MurmurError):
    """
    Raised when database operations fail unexpectedly.

    What:    A query, insert or delete failed (connection lost, constraint
             violation, deadlock).
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Details (statement,
    constraint name) go to the server log through `context`.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(MurmurError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with `Retry-After`)
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
