"""
Application factory.

    uvicorn productos_api.main:app

`create_app(settings)` wires logging, the database engine, the token issuer,
middleware, exception handlers and routers. Tests call it with their own
settings; the module-level `app` uses the environment.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from productos_api.api.v1 import api_router
from productos_api.api.v1.error_handlers import FaultTranslatorMiddleware, register_exception_handlers
from productos_api.config.settings import Settings, get_settings
from productos_api.core.logging import RequestIDMiddleware, setup_logging, stop_queue_logging
from productos_api.core.security import TokenIssuer
from productos_api.database.base import Base
from productos_api.database.session import create_engine_from_settings, make_session_factory
from productos_api.repositories.unit_of_work import UnitOfWork
from productos_api.services.auth_service import AuthService
from productos_api.utils.logging import get_project_name, get_project_version

import productos_api.models  # noqa: F401  (registers every model on Base.metadata)

logger = logging.getLogger(__name__)


async def seed_admin_user(app: FastAPI, settings: Settings) -> None:
    """Create the ADMIN_EMAIL account when it does not exist yet."""
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return

    async with UnitOfWork(app.state.session_factory) as uow:
        result = await AuthService(uow, app.state.token_issuer).ensure_user(
            settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD.get_secret_value()
        )
    if not result.is_success:
        raise RuntimeError(f"Could not seed the admin account: {result.error}")
    logger.info("startup.admin_seeded", extra={"account_created": result.status_code == 201})


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = app.state.engine

    if settings.DB_CREATE_ALL:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("startup.schema_created")

    await seed_admin_user(app, settings)
    logger.info("startup.complete", extra={"env": settings.ENV})

    try:
        yield
    finally:
        await engine.dispose()
        logger.info("shutdown.complete")
        stop_queue_logging()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=get_project_name(),
        version=get_project_version(),
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine_from_settings(settings)
    app.state.session_factory = make_session_factory(app.state.engine)
    app.state.token_issuer = TokenIssuer.from_settings(settings)

    register_exception_handlers(app)

    # Added last = outermost: the request id is set before the fault translator logs
    app.add_middleware(FaultTranslatorMiddleware, expose_details=not settings.is_production)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(api_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok", "service": get_project_name()}

    return app


def __getattr__(name: str):
    # Built on first access so importing this module does not require JWT_* settings
    if name == "app":
        application = create_app()
        globals()["app"] = application
        return application
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
