"""
Classification of SQLAlchemy IntegrityErrors.

These constraint-level classes are internal labels: `mapper.py` turns them into
the app-level faults in `base.py`, which are the only ones that leave the
repository layer.
"""

import logging
import re
from enum import Enum
from typing import Type

from sqlalchemy.exc import IntegrityError

from .base import RepositoryError

logger = logging.getLogger(__name__)


class ConstraintViolationError(RepositoryError):
    """Base for integrity/constraint violations."""


class UniqueConstraintError(ConstraintViolationError):
    """Unique constraint / duplicate value."""


class NotNullConstraintError(ConstraintViolationError):
    """NOT NULL violation (missing required field)."""


class ForeignKeyConstraintError(ConstraintViolationError):
    """Foreign key constraint violated."""


class CheckConstraintError(ConstraintViolationError):
    """CHECK constraint violated (e.g. price_positive)."""


class UnknownIntegrityError(ConstraintViolationError):
    """Unrecognized integrity error."""


# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"


PGCODE_EXCEPTION_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintError,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: NotNullConstraintError,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION.value: ForeignKeyConstraintError,
    PostgresErrorCodes.CHECK_VIOLATION.value: CheckConstraintError,
}

GENERIC_KEYWORDS: list[tuple[Type[ConstraintViolationError], tuple[str, ...]]] = [
    (UniqueConstraintError, ("unique constraint", "unique failed", "unique violation", "duplicate")),
    (NotNullConstraintError, ("not null constraint", "not null", "null value in column")),
    (ForeignKeyConstraintError, ("foreign key constraint", "foreign key", "is not present in table")),
    (CheckConstraintError, ("check constraint", "check failed")),
]


def _postgres_code(orig) -> str | None:
    # psycopg exposes `pgcode`; the asyncpg adapter exposes `sqlstate` (and `pgcode` on recent SQLAlchemy).
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _postgres_constraint_name(orig) -> str | None:
    diag = getattr(orig, "diag", None)
    if diag is not None:
        return getattr(diag, "constraint_name", None)
    # asyncpg: the driver exception is chained as the cause of the adapted error
    return getattr(getattr(orig, "__cause__", None), "constraint_name", None)


def _classify_from_postgres(orig) -> tuple[Type[ConstraintViolationError] | None, str | None]:
    pgcode = _postgres_code(orig)
    if not pgcode:
        return None, None

    constraint_name = _postgres_constraint_name(orig)
    exception_class = PGCODE_EXCEPTION_MAP.get(pgcode)
    if exception_class:
        logger.debug(
            "integrity.postgres_diagnostic",
            extra={"pgcode": pgcode, "constraint_name": constraint_name},
        )
        return exception_class, constraint_name

    logger.warning(
        "integrity.unknown_pgcode",
        extra={"pgcode": pgcode, "constraint_name": constraint_name},
    )
    return UnknownIntegrityError, constraint_name


def _classify_from_generic_message(msg: str) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Fallback for SQLite (and other drivers without error codes): keyword matching.
    """
    normalized = msg.lower()

    for exception_class, keywords in GENERIC_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            constraint_name = None
            if exception_class is CheckConstraintError:
                # SQLite: "CHECK constraint failed: ck_productos_price_positive"
                m = re.search(r"check constraint failed: (?P<name>\S+)", msg, flags=re.IGNORECASE)
                constraint_name = m.group("name") if m else None
            return exception_class, constraint_name

    logger.warning("integrity.unknown_message", extra={"message_snippet": (msg or "")[:200]})
    logger.debug("integrity.unknown_message_raw", extra={"raw": msg})
    return UnknownIntegrityError, None


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Classify a SQLAlchemy IntegrityError into a ConstraintViolationError subclass.

    Returns:
        A tuple of (ExceptionClass, constraint_name if available)
    """
    orig = exc.orig

    exception_class, constraint_name = _classify_from_postgres(orig)
    if exception_class is not None:
        return exception_class, constraint_name

    return _classify_from_generic_message(str(orig) if orig is not None else str(exc))
