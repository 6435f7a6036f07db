from .base import (
    AppError,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
    RepositoryError,
    DuplicateError,
    InvalidFieldError,
    status_to_exception_type,
)

# exceptions/
# ├── base.py                    # app-level faults + status/category tables
# ├── integrity_classifier.py    # SQL-level / DB-specific errors
# └── mapper.py                  # map SQL-level errors to app-level errors, db_error_handler()

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
