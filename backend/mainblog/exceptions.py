"""
Main Blog Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by services; caught by the global handlers.

Exception Hierarchy:
    MainBlogError (base)            → 500
    ├── ValidationError             → 400 (missing required fields)
    ├── AuthenticationError         → 400 (unknown user or wrong password)
    ├── ConflictError               → 400 (username already taken)
    ├── NotFoundError               → 404
    ├── FileStorageError            → 500
    └── DatabaseError               → 500

`message` is always safe to return to the client. `context` is logged
server-side only.
"""

from typing import Any, Dict, Optional


class MainBlogError(Exception):
    """
    Base exception for all application errors.

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


class ValidationError(MainBlogError):
    """
    Raised when client input fails the presence checks.

    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Please fill all the required fields",
            "details": {"missing": ["title", "category"]}
        }
    """

    def __init__(
        self,
        message: str = "Please fill all the required fields",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(MainBlogError):
    """
    Raised when login credentials do not match a stored user.

    HTTP:    400 Bad Request

    The message is identical for an unknown username and a wrong password so
    that responses do not reveal which usernames exist.
    """

    def __init__(
        self,
        message: str = "Invalid username or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConflictError(MainBlogError):
    """
    Raised when a create would duplicate a unique value (e.g. a username).

    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(MainBlogError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts that
    None into this exception.
    """

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


class FileStorageError(MainBlogError):
    """
    Raised when writing an uploaded file fails.

    HTTP:    500 Internal Server Error
    When:    Disk full, permission denied, upload directory not writable.
    """

    def __init__(
        self,
        message: str = "Failed to save uploaded image. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(MainBlogError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error
    When:    Connection lost, constraint violation, invalid search pattern, etc.

    The message names the failed operation ("Error fetching blogs"); the
    original exception is only logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
