"""
Base repository class providing common database operations.

This class serves as a reusable foundation for repositories that interact with
the database using SQLAlchemy's async sessions. It implements the
`CrudRepository` capability for any model with an integer `id`.

Writes are *staged*, not committed: `add`, `update` and `delete` register the
change on the session and return immediately. The unit of work that owns the
session decides when (and whether) the staged changes become durable, so a
repository never calls `commit()` itself.

Reads never raise for a missing row; they return `None` or an empty list. Store
faults (lost connection, bad SQL, ...) are logged and re-raised as a sanitized
`RepositoryError`, so callers never see driver exceptions.
"""
import logging
import time
from typing import Any, Generic, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from productos_api.database.base import INTEGER_MAX, INTEGER_MIN, Base
from productos_api.exceptions.base import InvalidFieldError, RepositoryError
from productos_api.validators.exception_validators import find_unknown_fields

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

# Setup logging
logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize the repository.

        Args:
            model: The SQLAlchemy model class (e.g. `Product`, not `Product()`),
                used to build queries dynamically: `select(self.model)`, ...
            db: The async session shared with every other repository of the
                same unit of work.
        """
        self.model = model
        self.db = db

    async def _fetch_all(self, query, operation: str) -> list[ModelType]:
        """Run a SELECT returning entities, wrapping store faults."""
        start = time.perf_counter()
        try:
            result = await self.db.execute(query)
            entities = list(result.scalars().all())
        except Exception as e:
            logger.error(
                "repo.query.failed",
                extra={"model": self.model.__name__, "operation": operation, "error": type(e).__name__},
            )
            raise RepositoryError(f"Failed to retrieve {self.model.__name__} entities") from e

        logger.debug(
            "repo.query.success",
            extra={
                "model": self.model.__name__,
                "operation": operation,
                "count": len(entities),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entities

    # =================================================================================================================
    # Read Operations
    # =================================================================================================================

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """
        Get an entity by its ID.

        Args:
            entity_id: The integer id of the entity to retrieve

        Returns:
            The entity if found, otherwise None. An id outside the range of the
            integer primary key cannot be stored, so it is None without a query.

        Raises:
            RepositoryError: If an error occurs during retrieval.
        """
        if not INTEGER_MIN <= entity_id <= INTEGER_MAX:
            logger.debug(
                "repo.get_by_id.out_of_range",
                extra={"model": self.model.__name__, "id": entity_id},
            )
            return None

        try:
            # SELECT * FROM <table> WHERE id = :entity_id
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            # 0 or 1 rows: the id is the primary key
            entity = result.scalar_one_or_none()
        except Exception as e:
            logger.error(
                f"Error retrieving {self.model.__name__} by ID {entity_id}: {type(e).__name__}")
            raise RepositoryError(
                f"Failed to retrieve {self.model.__name__}") from e

        logger.debug(
            "repo.get_by_id",
            extra={"model": self.model.__name__, "id": entity_id, "found": entity is not None},
        )
        return entity

    async def find_by_field(self, field: str, value: Any) -> ModelType | None:
        """
        Find a single entity by any mapped field.

        Raises:
            InvalidFieldError: If the field does not exist on the model.
            RepositoryError: If the query fails.
        """
        if find_unknown_fields(self.model, [field]):
            raise InvalidFieldError(
                f"{self.model.__name__} has no field '{field}'", fields=[field])

        try:
            result = await self.db.execute(
                select(self.model).where(getattr(self.model, field) == value)
            )
            # First match; callers use this on unique columns
            return result.scalars().first()
        except Exception as e:
            logger.error(
                f"Error finding {self.model.__name__} by {field}: {type(e).__name__}")
            raise RepositoryError(
                f"Failed to find {self.model.__name__}") from e

    async def get_all(
        self,
        offset: int = 0,                # Used for pagination: how many records to skip
        limit: int | None = None,       # Max number of records to return; None = no limit
        order_by: str | None = None     # Optional: field to sort results by
    ) -> list[ModelType]:
        """
        Get all entities, optionally ordered and paginated.

        Without `order_by` the order is whatever the store returns; pass a
        field (e.g. "id") when paginating so pages are stable.

        Raises:
            InvalidFieldError: If `order_by` is not a field of the model.
            RepositoryError: If the query fails.
        """
        query = select(self.model)

        if order_by:
            if find_unknown_fields(self.model, [order_by]):
                logger.info(
                    "repo.get_all.invalid_order_by",
                    extra={"model": self.model.__name__, "order_by": order_by},
                )
                raise InvalidFieldError(
                    f"Cannot order {self.model.__name__} by unknown field '{order_by}'",
                    fields=[order_by])
            query = query.order_by(getattr(self.model, order_by))

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        return await self._fetch_all(query, "get_all")

    async def count(self) -> int:
        """
        Count every row of the table.

        Returns:
            Number of entities (0 for an empty table)
        """
        try:
            result = await self.db.execute(select(func.count()).select_from(self.model))
            count = result.scalar() or 0
        except Exception as e:
            logger.error(f"Error counting {self.model.__name__}: {type(e).__name__}")
            raise RepositoryError(
                f"Failed to count {self.model.__name__} entities") from e

        logger.debug(f"Counted {count} {self.model.__name__} entities")
        return count

    # =================================================================================================================
    # Staged Write Operations
    # =================================================================================================================

    async def add(self, entity: ModelType) -> ModelType:
        """
        Stage an insert.

        The generated id (and server defaults) are populated when the unit of work
        flushes or commits, not here.
        """
        self.db.add(entity)
        logger.debug("repo.add.staged", extra={"model": self.model.__name__})
        return entity

    async def update(self, entity: ModelType) -> ModelType:
        """
        Stage a full-row overwrite of an entity loaded in this session.

        Attribute changes on a loaded entity are already tracked by the session;
        this re-attaches it in case it was expunged and makes the intent explicit.
        The version column is checked and bumped when the change is flushed.
        """
        self.db.add(entity)
        logger.debug(
            "repo.update.staged",
            extra={"model": self.model.__name__, "id": getattr(entity, "id", None)},
        )
        return entity

    async def delete(self, entity: ModelType) -> None:
        """Stage the removal of a loaded entity."""
        try:
            await self.db.delete(entity)
        except Exception as e:
            logger.error(
                f"Error deleting {self.model.__name__} {getattr(entity, 'id', None)}: {type(e).__name__}")
            raise RepositoryError(
                f"Failed to delete {self.model.__name__}") from e

        logger.debug(
            "repo.delete.staged",
            extra={"model": self.model.__name__, "id": getattr(entity, "id", None)},
        )
