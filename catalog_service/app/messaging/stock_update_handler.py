"""
Stock update handler
====================

Bridge between the queue processor and the synchronous business layer. Each
call opens its own database session, since the processor outlives any request.
"""

from abc import ABC, abstractmethod
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ProductValidationError
from ..core.settings import get_settings
from ..services.product_service import ProductService
from ..utils.logging import setup_catalog_logging as setup_logging

logger = setup_logging(
    "catalog_service.messaging.handler", log_level=get_settings().LOG_LEVEL
)


class StockUpdateHandler(ABC):
    """Applies one queued stock update"""

    @abstractmethod
    async def handle(self, product_id: int, quantity: int) -> bool:
        """Return True when applied, False when the update was a no-op or rejected"""


class ProductStockUpdateHandler(StockUpdateHandler):
    """Applies queued stock updates through ProductService"""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def handle(self, product_id: int, quantity: int) -> bool:
        logger.info(
            "Handling stock update",
            extra={"product_id": product_id, "quantity": quantity},
        )

        try:
            async with self.session_factory() as session:
                service = ProductService(session)
                result = await service.update_product_stock(product_id, quantity)
        except ProductValidationError as e:
            logger.warning(
                "Invalid stock update request",
                extra={
                    "product_id": product_id,
                    "quantity": quantity,
                    "error": e.message,
                },
            )
            return False
        except Exception:
            logger.error(
                "Error handling stock update",
                extra={"product_id": product_id, "quantity": quantity},
                exc_info=True,
            )
            raise

        if result:
            logger.info(
                "Stock update completed",
                extra={"product_id": product_id, "quantity": quantity},
            )
        else:
            logger.warning(
                "Stock update skipped - product not found",
                extra={"product_id": product_id},
            )
        return result
