"""
Unit of Work: one session, one transaction, one commit boundary.

    async with UnitOfWork(session_factory) as uow:
        product = await uow.products.get_by_id(1)
        product.price = Decimal("12.50")
        await uow.products.update(product)
        await uow.complete()

Every repository exposed by a unit of work shares its session, so all staged
operations are committed together by `complete()` or discarded together. The
session is rolled back (if anything is still pending) and closed when the
`async with` block exits, whatever the outcome, including cancellation.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from productos_api.exceptions.mapper import db_error_handler
from .product_repository import ProductRepository
from .user_repository import UserRepository

logger = logging.getLogger(__name__)


class UnitOfWork:
    products: ProductRepository
    users: UserRepository

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._completed = False

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork used outside of its 'async with' block")
        return self._session

    async def __aenter__(self) -> "UnitOfWork":
        self._session = self._session_factory()
        self._completed = False
        self.products = ProductRepository(self._session)
        self.users = UserRepository(self._session)
        logger.debug("uow.begin")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        session = self._session
        if session is None:
            return
        try:
            if exc_type is not None or not self._completed:
                await session.rollback()
                logger.debug(
                    "uow.rollback",
                    extra={"reason": exc_type.__name__ if exc_type else "not_completed"},
                )
        finally:
            await session.close()
            self._session = None

    async def complete(self) -> None:
        """
        Commit every staged operation atomically.

        Raises:
            DuplicateError: a unique constraint was violated.
            ConflictError: a versioned row changed or vanished since it was loaded.
            RepositoryError: any other store failure.
        """
        async with db_error_handler(self.session):
            await self.session.commit()
        self._completed = True
        logger.debug("uow.commit")
