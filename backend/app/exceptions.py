"""
Bug Reporter Backend — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions shared by the API server and the
       reporting client.
Why:   Targeted handling with the right HTTP status code on the server, and
       distinct recovery paths (inline message, log-and-continue, retry) on
       the client.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers in main.py turn server-side errors into
       structured JSON responses.

Exception Hierarchy:
    BugTrackerError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── ContextCollectionError   → client only; logged, submission continues
    ├── TransportError           → client only; HTTP call failed
    └── DatabaseError            → 500 Internal Server Error
        ├── PersistenceError     → write failed (create / update / delete)
        └── RetrievalError       → read failed (list / get)

None of these is fatal to the application: every failure is recoverable by
the user retrying the operation.
"""

from typing import Any, Dict, Optional


class BugTrackerError(Exception):
    """
    Base exception for all bug tracker errors.

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


class ValidationError(BugTrackerError):
    """
    Raised when input fails a business rule.

    On the server this becomes a 400 response. In the reporting client it
    blocks the submission before any network call and is shown next to the
    offending field (``field`` names it).
    """

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


class NotFoundError(BugTrackerError):
    """
    Raised when a referenced bug does not exist.

    SQLAlchemy returns None for missing rows; the service layer converts that
    into this exception so the handler can answer 404. Never auto-retried.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class ContextCollectionError(BugTrackerError):
    """
    Raised when the embedding application's context-data producer fails.

    Non-fatal: the composer logs it and submits without context metadata.
    """

    def __init__(
        self,
        message: str = "Could not collect context data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TransportError(BugTrackerError):
    """
    Raised by the reporting client when an HTTP call to the API fails.

    Covers both network failures (``status_code`` is None) and error
    responses from the server. The form keeps its field values so the user
    can retry.
    """

    def __init__(
        self,
        message: str = "Could not reach the bug tracker. Please try again.",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class DatabaseError(BugTrackerError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic; SQL details are
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(DatabaseError):
    """Storing a bug (create, update or delete) failed."""

    def __init__(
        self,
        message: str = "Could not save the bug report. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RetrievalError(DatabaseError):
    """Reading bugs from storage failed."""

    def __init__(
        self,
        message: str = "Could not retrieve bug reports. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
