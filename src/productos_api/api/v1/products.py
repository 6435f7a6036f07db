from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response

from productos_api.core.dependencies import get_product_service
from productos_api.core.security import require_user
from productos_api.schemas.product import ProductCreate, ProductUpdate
from productos_api.services.product_service import ProductService
from .responses import envelope_response

router = APIRouter(prefix="/api/producto", tags=["productos"])

# Static paths first so they are not captured by /{product_id}


@router.get("/search")
async def search_products(
    nombre: str | None = Query(default=None),
    service: ProductService = Depends(get_product_service),
) -> Response:
    return envelope_response(await service.search_by_name(nombre))


@router.get("/pricerange")
async def products_by_price_range(
    min_price: Decimal = Query(alias="minPrice"),
    max_price: Decimal = Query(alias="maxPrice"),
    service: ProductService = Depends(get_product_service),
) -> Response:
    return envelope_response(await service.get_by_price_range(min_price, max_price))


@router.get("")
async def list_products(
    offset: int = Query(default=0),
    limit: int | None = Query(default=None),
    service: ProductService = Depends(get_product_service),
) -> Response:
    return envelope_response(await service.list_products(offset=offset, limit=limit))


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> Response:
    return envelope_response(await service.get_product(product_id))


@router.post("", dependencies=[Depends(require_user)])
async def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> Response:
    result = await service.create_product(payload)
    headers = None
    if result.is_success:
        headers = {"Location": f"{router.prefix}/{result.data.id}"}
    return envelope_response(result, headers=headers)


@router.put("/{product_id}", dependencies=[Depends(require_user)])
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> Response:
    return envelope_response(await service.update_product(product_id, payload))


@router.delete("/{product_id}", dependencies=[Depends(require_user)])
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> Response:
    return envelope_response(await service.delete_product(product_id))
