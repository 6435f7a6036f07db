"""
Map SQL-level errors to app-level faults.

| Constraint-level (internal) | → | App-level (external)                       |
| --------------------------- | - | ------------------------------------------ |
| `UniqueConstraintError`     | → | `DuplicateError` (409)                     |
| `NotNullConstraintError`    | → | `RepositoryError("Missing ...")`           |
| `ForeignKeyConstraintError` | → | `RepositoryError("Ref ...")`               |
| `CheckConstraintError`      | → | `RepositoryError("Business rule ...")`     |
| `StaleDataError`            | → | `ConflictError` (409)                      |
| anything else               | → | `RepositoryError("Failed to operate ...")` |
"""
import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from .integrity_classifier import (
    classify_integrity_error,
    UniqueConstraintError,
    NotNullConstraintError,
    ForeignKeyConstraintError,
    CheckConstraintError,
)
from .base import AppError, ConflictError, DuplicateError, RepositoryError

logger = logging.getLogger(__name__)

# -----------------------
# Column extraction helpers
# -----------------------

def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    - 'null value in column "name" violates not-null constraint'
    - 'DETAIL:  Key (email)=(a@b.com) already exists.'
    """
    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # 'UNIQUE constraint failed: usuarios.email' / 'NOT NULL constraint failed: productos.name'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols"))]
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the DB message (Postgres, SQLite).
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    if not msg:
        return None
    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


# -----------------------
# Mapper
# -----------------------

def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Map a SQLAlchemy IntegrityError to an app-level exception and raise it.
    Populates `.fields` and `.constraint` where possible; never includes raw DB text.
    """
    exc_cls, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"

    if exc_cls is UniqueConstraintError:
        # Expected client-level scenario (409), so INFO
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        if columns:
            raise DuplicateError(
                f"{model_part} already exists for field(s): {', '.join(columns)}",
                fields=columns, constraint=constraint_name,
            ) from exc
        raise DuplicateError(f"{model_part} already exists", constraint=constraint_name) from exc

    if exc_cls is NotNullConstraintError:
        logger.info(
            "mapper.not_null_violation",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        if columns:
            raise RepositoryError(
                f"Missing required field(s): {', '.join(columns)} for {model_part}",
                fields=columns, constraint=constraint_name,
            ) from exc
        raise RepositoryError(f"Missing required field for {model_part}", constraint=constraint_name) from exc

    if exc_cls is ForeignKeyConstraintError:
        logger.info(
            "mapper.foreign_key_violation",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        raise RepositoryError(
            f"{model_part} referenced entity not found", fields=columns, constraint=constraint_name
        ) from exc

    if exc_cls is CheckConstraintError:
        raw = str(exc.orig) if exc.orig is not None else str(exc)
        # Raw DB message at DEBUG only
        logger.debug(
            "mapper.check_constraint_failure",
            extra={"model": model_part, "raw": raw, "constraint": constraint_name},
        )
        raise RepositoryError(
            f"{model_part} business rule violated (check constraint).", constraint=constraint_name
        ) from exc

    logger.warning(
        "mapper.unknown_integrity_error",
        extra={"model": model_part, "constraint": constraint_name},
    )
    raise RepositoryError(f"{model_part} database integrity error.") from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("mapper.rollback_failed", extra={"model": model_name})


# -----------------------
# Async context manager to DRY error handling in repositories
# -----------------------
@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise IntegrityError ...

    Rolls back on error and raises a mapped app-level exception. App-level
    faults raised inside the block pass through unchanged.
    """
    try:
        yield
    except AppError:
        await _safe_rollback(db, model_name)
        raise
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_mapped_integrity_error(exc, model_name)
    except StaleDataError as exc:
        await _safe_rollback(db, model_name)
        logger.info("mapper.stale_data", extra={"model": model_name})
        raise ConflictError(
            f"{model_name or 'Record'} was modified or deleted by another request"
        ) from exc
    except Exception as exc:
        await _safe_rollback(db, model_name)
        # Unexpected: full stack trace in the logs, generic message for callers.
        logger.exception("mapper.unexpected_db_error", extra={"model": model_name})
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc
