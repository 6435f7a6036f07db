"""
Repository layer initialization module.

Usage:
    from productos_api.repositories import UnitOfWork, ProductRepository
"""

from .base_repository import BaseRepository
from .interfaces import CrudRepository, ProductQueries, CredentialLookup, ProductStore, UserStore
from .product_repository import ProductRepository
from .user_repository import UserRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "BaseRepository",
    "CrudRepository",
    "ProductQueries",
    "CredentialLookup",
    "ProductStore",
    "UserStore",
    "ProductRepository",
    "UserRepository",
    "UnitOfWork",
]
