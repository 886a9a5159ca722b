"""
Snippetbox — Exception Hierarchy
==================================

What:  The closed set of error kinds that cross the store/handler boundary,
       plus the pipeline's own failure types.
How:   Each exception carries a user-safe message and a context dict.
       The context is logged server-side and never returned to the client.
Who:   Raised by the stores, the session capability and the router;
       translated to responses by the handlers and recover_panic.

Exception Hierarchy:
    SnippetboxError (base)
    ├── NoRecord              → 404 Not Found (absent or expired)
    ├── InvalidCredentials    → 400 Bad Request (generic message)
    ├── DuplicateEmail        → 400 Bad Request (field-specific message)
    ├── FormError             → 422 Unprocessable Entity (per-field messages)
    ├── PersistenceError      → 500 Internal Server Error
    │   └── SessionUnavailable
    ├── ServerFault           → 500, produced only by recover_panic
    └── RouteConfigError      → raised at startup, never during a request
"""

from typing import Any, Dict, Optional


class SnippetboxError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing description (safe to return in a response)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NoRecord(SnippetboxError):
    """
    No matching record.

    Raised for ids that never existed and for snippets whose expiry has
    passed. The two cases are deliberately indistinguishable.
    """

    def __init__(
        self,
        resource: str = "record",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        super().__init__(message=f"The requested {resource} was not found", context=ctx)
        self.resource = resource


class InvalidCredentials(SnippetboxError):
    """Unknown email or wrong password; the message is identical for both."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Email or password is incorrect", context=context)


class DuplicateEmail(SnippetboxError):
    """
    The email address is already registered.

    Raised by UserStore.insert when the database's unique constraint on
    users.email rejects the row.
    """

    def __init__(
        self,
        field: str = "email",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["field"] = field
        super().__init__(message="Address is already in use", context=ctx)
        self.field = field


class FormError(SnippetboxError):
    """
    Submitted form data failed validation.

    field_errors maps each offending form field to a human-readable message.
    """

    def __init__(
        self,
        field_errors: Dict[str, str],
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message="Please correct the errors below", context=context)
        self.field_errors = field_errors


class PersistenceError(SnippetboxError):
    """
    Catch-all for storage faults.

    Connection loss, constraint violations other than the unique email,
    decode failures. The client always sees a generic message; the original
    error type and operation go into context for the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SessionUnavailable(PersistenceError):
    """The session store could not be reached or failed to persist state."""

    def __init__(
        self,
        message: str = "Session storage is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ServerFault(SnippetboxError):
    """
    An unexpected fault intercepted at the top of the pipeline.

    Wraps the original exception together with the request line so the
    fault reporter has everything it needs.
    """

    def __init__(
        self,
        cause: BaseException,
        method: str = "",
        path: str = "",
    ):
        super().__init__(
            message="Internal Server Error",
            context={
                "error_type": type(cause).__name__,
                "method": method,
                "path": path,
            },
        )
        self.cause = cause
        self.method = method
        self.path = path


class RouteConfigError(SnippetboxError):
    """A route registration is malformed or conflicts with an existing one."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)
