"""Service layer for Catalog Service"""

from .product_service import ProductService, normalize_page

__all__ = [
    "ProductService",
    "normalize_page",
]
