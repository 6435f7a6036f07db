
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from productos_api.config.settings import Settings


def enable_sqlite_case_sensitive_like(engine: AsyncEngine) -> None:
    """
    Make LIKE case-sensitive on SQLite connections.

    PostgreSQL's LIKE is already case-sensitive; SQLite's is not for ASCII text,
    which would make the product name search behave differently per store.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA case_sensitive_like = ON")
        cursor.close()


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,   # Set to False in production
        pool_pre_ping=True,              # Enables connection health checks
    )
    enable_sqlite_case_sensitive_like(engine)
    return engine


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps committed entities readable after complete(),
    # e.g. the generated id used for the Location header.
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
