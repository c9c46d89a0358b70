from .common import ApiResponse, PagedResult
from .product import (
    ProductCreate,
    ProductResponse,
    ProductStockUpdate,
    StockUpdateAccepted,
    StockUpdateResult,
)

__all__ = [
    "ApiResponse",
    "PagedResult",
    "ProductCreate",
    "ProductResponse",
    "ProductStockUpdate",
    "StockUpdateAccepted",
    "StockUpdateResult",
]
