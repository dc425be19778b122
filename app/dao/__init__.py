# Export all DAO classes
from .base_dao import BaseDAO
from .product_dao import product_dao

__all__ = [
    "BaseDAO",
    "product_dao",
]
