"""Fixtures for repository, unit-of-work and service tests."""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from productos_api.models.product import Product
from productos_api.models.user import User
from productos_api.repositories.product_repository import ProductRepository
from productos_api.repositories.user_repository import UserRepository

# NOTE: fixtures here depend on `db_session` / `session_factory` defined in conftest.py,
# each backed by a fresh database per test.

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse battery staple"


@pytest.fixture
def product_repository(db_session: AsyncSession) -> ProductRepository:
    return ProductRepository(db_session)


@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def sample_product_data() -> dict:
    """
    Deterministic product fields (ORM attribute names, not wire names).
    Kept synchronous because it does not touch the DB.
    """
    return {"name": "Widget", "price": Decimal("9.99"), "quantity": 5}


@pytest.fixture
async def create_product(session_factory):
    """
    Factory that commits a product in its own session and returns it (detached,
    attributes loaded), so the row is visible to any other session of the test.

    Usage:
        product = await create_product(name="Gadget", price=Decimal("3.50"))
    """
    async def _create(**overrides) -> Product:
        data = {"name": "Widget", "price": Decimal("9.99"), "quantity": 5}
        data.update(overrides)
        async with session_factory() as session:
            product = Product(**data)
            session.add(product)
            await session.commit()
            return product

    return _create


@pytest.fixture
async def catalogue(create_product) -> list[Product]:
    """
    A small catalogue with boundary-friendly prices and mixed-case names.
    """
    return [
        await create_product(name="Widget", price=Decimal("9.99"), quantity=5),
        await create_product(name="widget mini", price=Decimal("5.00"), quantity=0),
        await create_product(name="Gadget", price=Decimal("20.00"), quantity=2),
        await create_product(name="100% Cotton_Shirt", price=Decimal("15.50"), quantity=7),
    ]


@pytest.fixture
async def admin_user(session_factory) -> User:
    """A committed, active user whose password is ADMIN_PASSWORD."""
    async with session_factory() as session:
        user = await UserRepository(session).create_user(ADMIN_EMAIL, ADMIN_PASSWORD)
        await session.commit()
        return user
