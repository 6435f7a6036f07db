from fastapi import APIRouter

from . import auth, products

api_router = APIRouter()
api_router.include_router(products.router)
api_router.include_router(auth.router)

__all__ = ["api_router"]
