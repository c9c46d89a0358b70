"""Product service for catalog business logic"""

import math
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import CatalogPersistenceError, ProductValidationError
from ..core.settings import get_settings
from ..models.base import utc_now
from ..models.product import Product
from ..repository.product_repository import ProductRepository
from ..utils.logging import setup_catalog_logging as setup_logging

logger = setup_logging("catalog_service.products", log_level=get_settings().LOG_LEVEL)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Largest id the store's 64-bit integer key can hold
MAX_PRODUCT_ID = 2**63 - 1

T = TypeVar("T")


def normalize_page(
    page_number: int,
    page_size: int,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> Tuple[int, int]:
    """Clamp paging parameters instead of rejecting them."""
    if page_number < 1:
        page_number = 1
    if page_size < 1:
        page_size = default_page_size
    elif page_size > max_page_size:
        page_size = max_page_size
    return page_number, page_size


def _is_storable_id(product_id: int) -> bool:
    return 0 < product_id <= MAX_PRODUCT_ID


class ProductService:
    """Service class for product business logic"""

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = utc_now,
        correlation_id: Optional[str] = None,
    ):
        self.db = db
        self.repository = ProductRepository(db)
        self.clock = clock
        self.correlation_id = correlation_id

    async def _run(self, operation: str, action: Callable[[], Awaitable[T]]) -> T:
        """Run a store call, turning database failures into CatalogPersistenceError"""
        try:
            return await action()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Product store failure during {operation}",
                extra={
                    "operation": operation,
                    "error": str(e),
                    "correlation_id": self.correlation_id,
                },
                exc_info=True,
            )
            raise CatalogPersistenceError(operation) from e

    async def get_all_products(self) -> Sequence[Product]:
        """Get all products ordered by creation date, newest first"""
        logger.info(
            "Retrieving all products",
            extra={"correlation_id": self.correlation_id},
        )
        return await self._run("get_all", self.repository.get_all)

    async def get_product_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID; invalid ids and unknown ids both yield None"""
        if not _is_storable_id(product_id):
            logger.warning(
                "Invalid product ID",
                extra={"product_id": product_id, "correlation_id": self.correlation_id},
            )
            return None

        product = await self._run(
            "get_by_id", lambda: self.repository.get_by_id(product_id)
        )
        logger.info(
            "Product retrieved" if product else "Product not found",
            extra={"product_id": product_id, "correlation_id": self.correlation_id},
        )
        return product

    async def create_product(
        self,
        name: Optional[str],
        image_url: Optional[str],
        price: Optional[Decimal] = None,
        description: Optional[str] = None,
        quantity: Optional[int] = None,
    ) -> Product:
        """Create a new product with trimmed name and image URL"""
        if name is None or not name.strip():
            raise ProductValidationError("Product name cannot be empty", field="name")
        if image_url is None or not image_url.strip():
            raise ProductValidationError(
                "Image URL cannot be empty", field="imageUrl"
            )
        if price is not None and price < 0:
            raise ProductValidationError("Price must be positive", field="price")
        if quantity is not None and quantity < 0:
            raise ProductValidationError(
                "Quantity cannot be negative", field="quantity"
            )

        now = self.clock()
        product = Product(
            name=name.strip(),
            image_url=image_url.strip(),
            price=price,
            description=description,
            quantity=quantity if quantity is not None else 0,
            created_at=now,
            updated_at=now,
        )

        created = await self._run("add", lambda: self.repository.add(product))
        logger.info(
            "Product created successfully",
            extra={"product_id": created.id, "correlation_id": self.correlation_id},
        )
        return created

    async def update_product_stock(self, product_id: int, quantity: int) -> bool:
        """Set the absolute stock level of a product.

        Returns False when the product does not exist, raises
        ProductValidationError for a negative quantity.
        """
        logger.info(
            "Updating product stock",
            extra={
                "product_id": product_id,
                "quantity": quantity,
                "correlation_id": self.correlation_id,
            },
        )

        if quantity < 0:
            raise ProductValidationError(
                "Quantity cannot be negative", field="quantity"
            )

        if not _is_storable_id(product_id):
            logger.warning("Invalid product ID", extra={"product_id": product_id})
            return False

        product = await self._run(
            "get_by_id", lambda: self.repository.get_by_id(product_id)
        )
        if product is None:
            logger.warning("Product not found", extra={"product_id": product_id})
            return False

        product.quantity = quantity
        product.updated_at = self.clock()
        await self._run("update", lambda: self.repository.update(product))

        logger.info(
            "Stock updated successfully",
            extra={
                "product_id": product_id,
                "quantity": quantity,
                "correlation_id": self.correlation_id,
            },
        )
        return True

    async def get_paged_products(
        self, page_number: int, page_size: int
    ) -> Tuple[List[Product], int, int]:
        """Get one page of products, newest first.

        Returns (items, total_count, total_pages). Out-of-range pages yield no
        items while still reporting the full total.
        """
        settings = get_settings()
        page_number, page_size = normalize_page(
            page_number,
            page_size,
            default_page_size=settings.DEFAULT_PAGE_SIZE,
            max_page_size=settings.MAX_PAGE_SIZE,
        )

        items, total_count = await self._run(
            "get_paged", lambda: self.repository.get_paged(page_number, page_size)
        )
        total_pages = math.ceil(total_count / page_size)

        logger.info(
            "Retrieved product page",
            extra={
                "page_number": page_number,
                "page_size": page_size,
                "total_count": total_count,
                "total_pages": total_pages,
                "correlation_id": self.correlation_id,
            },
        )
        return items, total_count, total_pages
