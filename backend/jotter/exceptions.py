"""
Jotter Backend: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for every failure a request can hit.
How:   Each exception class carries a client-safe message and an optional
       context dict. Global exception handlers (registered in main.py) catch
       these and return structured JSON error responses with the right status.
Who:   Raised by services and the auth gate; caught by global handlers.

Exception Hierarchy:
    JotterError (base)
    ├── ValidationError          → 400 Bad Request (missing/invalid fields)
    ├── DuplicateUsernameError   → 400 Bad Request
    ├── NotFoundError            → 404 Not Found (user, or note not owned)
    ├── AuthenticationError      → 401 Unauthorized (wrong password)
    ├── MissingTokenError        → 401 Unauthorized (no Authorization header)
    ├── InvalidTokenError        → 403 Forbidden (bad, expired, or malformed token)
    ├── StorageError             → 500 Internal Server Error
    └── HashingError             → 500 Internal Server Error

Information hiding:
    - A note that exists but belongs to someone else raises NotFoundError,
      exactly like a note that does not exist.
    - InvalidTokenError never says which token check failed.
    - StorageError/HashingError keep driver messages in `context` only;
      handlers log the context and return a generic message.
"""

from typing import Any, Dict, Optional


class JotterError(Exception):
    """
    Base exception for all Jotter application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(JotterError):
    """
    Raised when client input fails validation.

    When:    Missing username/password on register or login, password longer
             than bcrypt accepts, malformed request body.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Missing fields",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DuplicateUsernameError(JotterError):
    """
    Raised when registration hits the unique constraint on users.username.

    Detected from the database's IntegrityError, not from a prior lookup,
    so two concurrent registrations of one name cannot both succeed.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Username already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(JotterError):
    """
    Raised when a requested resource does not exist for the caller.

    What:    Unknown username at login, or a note id that matches no row
             owned by the authenticated user.
    HTTP:    404 Not Found
    """

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


class AuthenticationError(JotterError):
    """
    Raised when a login presents a password that does not match the stored hash.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MissingTokenError(JotterError):
    """
    Raised by the auth gate when a protected request has no Authorization header.

    HTTP:    401 Unauthorized (kept distinct from a present-but-invalid token)
    """

    def __init__(
        self,
        message: str = "Missing token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(JotterError):
    """
    Raised by the auth gate when the presented token does not verify.

    Covers malformed tokens, bad signatures, expired tokens, and a header
    without a token segment. The response is identical for all of them.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageError(JotterError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, lock timeout, foreign key violation.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Driver errors and SQL text are logged server-side only.
    """

    def __init__(
        self,
        message: str = "Database error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class HashingError(JotterError):
    """
    Raised when bcrypt cannot hash a password or cannot parse a stored hash.

    HTTP:    500 Internal Server Error (never treated as a failed login)
    """

    def __init__(
        self,
        message: str = "Error processing password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
