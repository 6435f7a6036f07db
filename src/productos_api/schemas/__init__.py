from .common import Result, ResultList, ErrorDetails
from .product import ProductCreate, ProductUpdate, ProductRead
from .auth import LoginRequest, UserRead, AuthResponse

__all__ = [
    "Result",
    "ResultList",
    "ErrorDetails",
    "ProductCreate",
    "ProductUpdate",
    "ProductRead",
    "LoginRequest",
    "UserRead",
    "AuthResponse",
]
