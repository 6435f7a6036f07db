"""
Application fault taxonomy.

Every fault carries a user-facing message, a canonical `error_code`, the HTTP
status it maps to and the category label (`exception_type`) that ends up in the
`exceptionType` field of the error body.

Services do not raise these for expected business outcomes (they return failure
envelopes instead); they are raised by the repository layer for store faults,
by the credential layer for bad tokens, and by the unit of work on commit.
Whatever escapes a request is classified by the fault translator.
"""

from typing import Iterable


# Map canonical error_code -> default HTTP status.
ERROR_CODE_TO_STATUS = {
    "validation": 400,
    "invalid_field": 400,
    "unauthorized": 401,
    "not_found": 404,
    "conflict": 409,
    "duplicate": 409,
    "repository": 500,
}

# Map HTTP status -> fault category label shown to clients.
STATUS_TO_EXCEPTION_TYPE = {
    400: "Validation Error",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Validation Error",
}


def status_to_exception_type(status_code: int) -> str:
    """
    Return the fault category label for an HTTP status.

    Unlisted 4xx statuses are reported as "Client Error"; every 5xx (and any
    other status) as "Server Error".
    """
    if status_code in STATUS_TO_EXCEPTION_TYPE:
        return STATUS_TO_EXCEPTION_TYPE[status_code]
    if 400 <= status_code < 500:
        return "Client Error"
    return "Server Error"


class AppError(Exception):
    """
    Base exception for application faults.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['precio'])
    - error_code: canonical short code (e.g., 'not_found', 'duplicate')
    """

    default_error_code = "repository"

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.error_code = error_code or self.default_error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def http_status(self) -> int:
        return ERROR_CODE_TO_STATUS.get(self.error_code, 500)

    @property
    def exception_type(self) -> str:
        return status_to_exception_type(self.http_status())


class ValidationError(AppError):
    """Rejected input. Services return 400 envelopes; kept so a raised rejection maps to 400."""

    default_error_code = "validation"


class NotFoundError(AppError):
    """Missing resource. Services return 404 envelopes; kept so a raised miss maps to 404."""

    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class UnauthorizedError(AppError):
    """Missing, invalid or expired bearer credential, or rejected login."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, error_code="unauthorized")


class ConflictError(AppError):
    """The row changed since it was loaded (optimistic concurrency)."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="conflict")


# Repository-level faults

class RepositoryError(AppError):
    """
    Store failure. Messages are sanitized: they never include raw driver text.

    - constraint: optional DB constraint name (for logs only, never returned to clients)
    """

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message, fields=fields, error_code=error_code or "repository")
        self.constraint = constraint

    def __str__(self) -> str:
        base = super().__str__()
        if self.constraint:
            return f"{base} [constraint: {self.constraint}]"
        return base


class DuplicateError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class InvalidFieldError(RepositoryError):
    """Raised when the caller passes unexpected/unknown fields to repository methods."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


__all__ = [
    "AppError",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ConflictError",
    "RepositoryError",
    "DuplicateError",
    "InvalidFieldError",
    "status_to_exception_type",
]
