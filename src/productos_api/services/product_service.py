"""
Product use cases.

Every method returns a `Result` or `ResultList`. Validation runs before the
store is touched, so a rejected request never persists anything.
"""
import logging
from decimal import Decimal

from productos_api.database.base import INTEGER_MAX
from productos_api.models.product import Product
from productos_api.repositories.unit_of_work import UnitOfWork
from productos_api.schemas.common import Result, ResultList
from productos_api.schemas.product import ProductCreate, ProductRead, ProductUpdate, ProductWrite
from .base_service import store_faults_as_failure

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
CENT = Decimal("0.01")
# Numeric(12, 2): ten integer digits
PRICE_LIMIT = Decimal("10000000000")


def validate_product_fields(payload: ProductWrite) -> list[str]:
    """Return the rule violations of a create/update payload (empty when valid)."""
    errors = []

    # Blank names are rejected; valid names are stored as sent
    name = payload.name or ""
    if not name.strip():
        errors.append("nombre is required")
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(f"nombre must be at most {NAME_MAX_LENGTH} characters")

    price = payload.price
    if price is None or not price.is_finite() or price <= 0:
        errors.append("precio must be greater than zero")
    elif price >= PRICE_LIMIT:
        errors.append(f"precio must be less than {PRICE_LIMIT}")
    elif price != price.quantize(CENT):
        errors.append("precio must have at most two decimal places")

    if payload.quantity is not None:
        if payload.quantity < 0:
            errors.append("cantidad cannot be negative")
        elif payload.quantity > INTEGER_MAX:
            errors.append(f"cantidad must be at most {INTEGER_MAX}")

    return errors


class ProductService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @store_faults_as_failure(Result)
    async def get_product(self, product_id: int) -> Result[ProductRead]:
        product = await self.uow.products.get_by_id(product_id)
        if product is None:
            return Result.failure(f"Product {product_id} not found", 404)
        return Result.success(ProductRead.model_validate(product))

    @store_faults_as_failure(ResultList)
    async def list_products(self, offset: int = 0, limit: int | None = None) -> ResultList[ProductRead]:
        """
        One page of products ordered by id; `total_records` counts the whole table.
        """
        if offset < 0 or (limit is not None and limit < 1):
            return ResultList.failure("offset must be >= 0 and limit must be >= 1", 400)

        products = await self.uow.products.get_all(offset=offset, limit=limit, order_by="id")
        total = await self.uow.products.count()
        return ResultList.success([ProductRead.model_validate(p) for p in products], total)

    @store_faults_as_failure(ResultList)
    async def search_by_name(self, term: str | None) -> ResultList[ProductRead]:
        products = await self.uow.products.search_by_name(term or "")
        return ResultList.success([ProductRead.model_validate(p) for p in products])

    @store_faults_as_failure(ResultList)
    async def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> ResultList[ProductRead]:
        if min_price < 0 or max_price < 0:
            return ResultList.failure("minPrice and maxPrice cannot be negative", 400)
        if min_price > max_price:
            return ResultList.failure("minPrice cannot be greater than maxPrice", 400)

        products = await self.uow.products.get_by_price_range(min_price, max_price)
        return ResultList.success([ProductRead.model_validate(p) for p in products])

    @store_faults_as_failure(Result)
    async def create_product(self, payload: ProductCreate) -> Result[ProductRead]:
        errors = validate_product_fields(payload)
        if errors:
            logger.info("service.product.create.invalid", extra={"errors": errors})
            return Result.failure("; ".join(errors), 400)

        product = Product(
            name=payload.name,
            price=payload.price,
            quantity=payload.quantity or 0,
        )
        await self.uow.products.add(product)
        await self.uow.complete()

        logger.info("service.product.created", extra={"id": product.id})
        return Result.success(ProductRead.model_validate(product), 201)

    @store_faults_as_failure(Result)
    async def update_product(self, product_id: int, payload: ProductUpdate) -> Result[ProductRead]:
        """
        Overwrite every editable field of an existing product.

        The path id must equal the payload's `productoId`; a missing payload id
        counts as a mismatch. When the payload carries a `version`, it must be
        the stored one.
        """
        if payload.id != product_id:
            logger.info(
                "service.product.update.id_mismatch",
                extra={"path_id": product_id, "payload_id": payload.id},
            )
            return Result.failure(
                f"Route id {product_id} does not match productoId {payload.id}", 400)

        errors = validate_product_fields(payload)
        if errors:
            logger.info("service.product.update.invalid", extra={"id": product_id, "errors": errors})
            return Result.failure("; ".join(errors), 400)

        product = await self.uow.products.get_by_id(product_id)
        if product is None:
            return Result.failure(f"Product {product_id} not found", 404)

        if payload.version is not None and payload.version != product.version:
            logger.info(
                "service.product.update.stale",
                extra={"id": product_id, "expected": payload.version, "stored": product.version},
            )
            return Result.failure(
                f"Product {product_id} was modified by another request; reload and retry", 409)

        product.name = payload.name
        product.price = payload.price
        product.quantity = payload.quantity or 0
        await self.uow.products.update(product)
        await self.uow.complete()

        logger.info("service.product.updated", extra={"id": product_id, "version": product.version})
        return Result.success(ProductRead.model_validate(product))

    @store_faults_as_failure(Result)
    async def delete_product(self, product_id: int) -> Result[bool]:
        product = await self.uow.products.get_by_id(product_id)
        if product is None:
            return Result.failure(f"Product {product_id} not found", 404)

        await self.uow.products.delete(product)
        await self.uow.complete()

        logger.info("service.product.deleted", extra={"id": product_id})
        return Result.success(True, 204)
