"""
Capability interfaces for the repository layer.

Repositories are described by what they can do rather than by what they inherit
from: every repository offers `CrudRepository`, and entity-specific query sets
(`ProductQueries`, `CredentialLookup`) are composed on top of it. Services and
tests depend on these protocols, not on the concrete classes.
"""
from decimal import Decimal
from typing import Protocol, Sequence, TypeVar, runtime_checkable

from productos_api.models import Product, User

T = TypeVar("T")


@runtime_checkable
class CrudRepository(Protocol[T]):
    async def get_by_id(self, entity_id: int) -> T | None:
        """Return the entity, or None when the id is absent (never raises for that)."""
        ...

    async def get_all(self, offset: int = 0, limit: int | None = None,
                      order_by: str | None = None) -> list[T]:
        ...

    async def count(self) -> int:
        ...

    async def add(self, entity: T) -> T:
        """Stage an insert; visible to other transactions after the unit of work commits."""
        ...

    async def update(self, entity: T) -> T:
        """Stage a full-row overwrite of an entity loaded in this unit of work."""
        ...

    async def delete(self, entity: T) -> None:
        """Stage a removal."""
        ...


@runtime_checkable
class ProductQueries(Protocol):
    async def search_by_name(self, term: str) -> Sequence[Product]:
        """Case-sensitive containment match against the stored name."""
        ...

    async def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> Sequence[Product]:
        """Products with `min_price <= price <= max_price`."""
        ...


@runtime_checkable
class CredentialLookup(Protocol):
    async def get_by_email(self, email: str) -> User | None:
        ...

    async def get_by_credentials(self, email: str, password: str) -> User | None:
        """First active user matching email and password, or None."""
        ...


class ProductStore(CrudRepository[Product], ProductQueries, Protocol):
    pass


class UserStore(CrudRepository[User], CredentialLookup, Protocol):
    async def create_user(self, email: str, password: str) -> User:
        ...
