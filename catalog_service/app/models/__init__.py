"""Catalog Service Models"""

from .base import CatalogServiceBase, CatalogServiceBaseModel, utc_now
from .product import Product

__all__ = [
    "CatalogServiceBase",
    "CatalogServiceBaseModel",
    "Product",
    "utc_now",
]
