from .product_service import ProductService
from .auth_service import AuthService

__all__ = ["ProductService", "AuthService"]
