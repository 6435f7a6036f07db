"""
Product repository: generic CRUD plus the catalogue queries.
"""
import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from productos_api.models.product import Product
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ProductRepository(BaseRepository[Product]):
    """
    Repository for Product entity operations (`CrudRepository[Product]` +
    `ProductQueries`).
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Product, db)

    async def search_by_name(self, term: str) -> list[Product]:
        """
        Products whose name contains `term`, case-sensitively.

        `%` and `_` in the term are matched literally (autoescape). An empty
        term matches every product. SQLite connections must run with
        `PRAGMA case_sensitive_like = ON` (see `database.session`), PostgreSQL's
        LIKE is case-sensitive already.
        """
        query = (
            select(Product)
            .where(Product.name.contains(term, autoescape=True))
            .order_by(Product.id)
        )
        products = await self._fetch_all(query, "search_by_name")
        logger.debug("repo.product.search", extra={"term_length": len(term), "count": len(products)})
        return products

    async def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        """
        Products with `min_price <= price <= max_price` (both bounds inclusive).
        """
        query = (
            select(Product)
            .where(Product.price.between(min_price, max_price))
            .order_by(Product.price, Product.id)
        )
        return await self._fetch_all(query, "get_by_price_range")
