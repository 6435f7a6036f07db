"""
Core pytest configuration for the entire test suite.

This module provides only the essential database setup and core utilities
that are needed across ALL types of tests (repositories, services, API, ...).

Domain-specific fixtures are located in:
- tests/test_fixtures/repository_fixtures.py
- tests/test_fixtures/api_fixtures.py

Database strategy:
- Default: a fresh in-memory SQLite database per test (StaticPool, so every
  session of the test shares the single in-memory connection).
- `TEST_DATABASE_URL` (e.g. a PostgreSQL test database in CI) overrides it; the
  schema is created and dropped around each test.
"""
from __future__ import annotations

import os
import logging
from typing import AsyncGenerator
from urllib.parse import urlparse

# ---------------------------------------------------------------------------
# Silence noisy third-party loggers as early as possible (before they are used)
# ---------------------------------------------------------------------------
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
    "httpcore",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from productos_api.config.settings import Settings
from productos_api.core.logging.builder import setup_logging
from productos_api.database.base import Base
from productos_api.database.session import enable_sqlite_case_sensitive_like, make_session_factory
from productos_api import models  # noqa: F401 – import to register models with Base.metadata
from productos_api.repositories.unit_of_work import UnitOfWork

from productos_api.tests.test_fixtures.settings_fixtures import IN_MEMORY_SQLITE, make_test_settings

# Fixture modules
from productos_api.tests.test_fixtures.repository_fixtures import *  # noqa: F401,F403
from productos_api.tests.test_fixtures.api_fixtures import *  # noqa: F401,F403

logger = logging.getLogger(__name__)


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL") or IN_MEMORY_SQLITE
logger.info(f"Using test DB: {safe_log_db_url(TEST_DATABASE_URL)}")


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install application logging for the entire test session, the same way the
    app does at startup. Tests that assert on logs use `caplog`, whose handler is
    attached per test and is unaffected by this configuration.
    """
    setup_logging(make_test_settings())
    yield


@pytest.fixture
def test_settings() -> Settings:
    return make_test_settings()


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh database engine with the schema created.
    """
    if TEST_DATABASE_URL == IN_MEMORY_SQLITE:
        engine = create_async_engine(
            IN_MEMORY_SQLITE,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)
    enable_sqlite_case_sensitive_like(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(async_engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    A plain session for repository tests. Repositories only stage; tests call
    `commit()` themselves when they need data visible to another session.
    """
    session = session_factory()
    try:
        yield session
    finally:
        await session.rollback()
        await session.close()


@pytest.fixture
async def uow(session_factory) -> AsyncGenerator[UnitOfWork, None]:
    """An entered unit of work, as a request would get it."""
    async with UnitOfWork(session_factory) as unit_of_work:
        yield unit_of_work
