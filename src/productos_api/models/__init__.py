r"""
Centralized access to all database models.

Importing this package registers every model with `Base.metadata`, which is what
schema creation (startup hook, test fixtures) relies on.

    from productos_api.models import Product, User
"""

from .product import Product
from .user import User

__all__ = [
    "Product",
    "User",
]
