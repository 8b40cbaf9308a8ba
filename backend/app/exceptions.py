"""
Ledgerline Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for each error outcome of a request.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py translate them into
       `{"error": message}` JSON bodies with the matching status code.
Who:   Raised by the gateway, validators and services; caught by main.py.

Exception Hierarchy:
    FinanceAPIError (base)
    ├── ValidationError   → 400 Bad Request (missing fields, nothing to update)
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict (duplicate unique value)
    └── StoreError        → 500 Internal Server Error (any other DB failure)

No retries anywhere: a failed statement surfaces immediately as one of these.
"""

from typing import Any, Dict, Optional

# SQLSTATE codes the gateway classifies (same values on every backend)
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
UNKNOWN_ERROR = "unknown"


class FinanceAPIError(Exception):
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


class ValidationError(FinanceAPIError):
    """
    Raised when client input fails validation before any query is issued.

    HTTP:    400 Bad Request

    Example response:
        {"error": "Name and email are required"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.fields = fields or []


class NotFoundError(FinanceAPIError):
    """
    Raised when an operation targets an id that does not exist.

    HTTP:    404 Not Found

    The message follows the "<Resource> not found" form, e.g. "Account not found".
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class ConflictError(FinanceAPIError):
    """
    Raised when a write collides with a unique constraint (user email).

    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(FinanceAPIError):
    """
    Raised when a database statement fails.

    What:    Carries the store's error `code` so callers can tell a unique
             violation (23505) or foreign-key violation (23503) apart from
             everything else.
    HTTP:    500 Internal Server Error (unless a service converts it)

    Security Note:
        `message` is generic and safe to return. The original exception type
        and driver message live in `context` and are logged server-side only.
    """

    def __init__(
        self,
        message: str = "Server error",
        code: str = UNKNOWN_ERROR,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["code"] = code
        super().__init__(message=message, context=ctx)
        self.code = code

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION

    @property
    def is_foreign_key_violation(self) -> bool:
        return self.code == FOREIGN_KEY_VIOLATION

    def with_message(self, message: str) -> "StoreError":
        """Same code and context, different user-facing message."""
        return StoreError(message=message, code=self.code, context=dict(self.context))
