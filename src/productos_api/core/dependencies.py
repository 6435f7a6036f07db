"""
FastAPI dependencies wiring requests to the unit of work and the services.
"""
from typing import AsyncIterator

from fastapi import Depends, Request

from productos_api.core.security import TokenIssuer, get_token_issuer
from productos_api.repositories.unit_of_work import UnitOfWork
from productos_api.services.auth_service import AuthService
from productos_api.services.product_service import ProductService


async def get_unit_of_work(request: Request) -> AsyncIterator[UnitOfWork]:
    # One unit of work per request, never shared
    async with UnitOfWork(request.app.state.session_factory) as uow:
        yield uow


def get_product_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> ProductService:
    return ProductService(uow)


def get_auth_service(
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(uow, token_issuer)
