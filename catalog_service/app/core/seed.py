"""Sample catalog used to seed an empty development database"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models.product import Product
from ..repository.product_repository import ProductRepository
from ..utils.logging import setup_catalog_logging as setup_logging

logger = setup_logging("catalog_service.seed")

SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {
        "name": "Gaming Laptop Pro X15",
        "image_url": "https://images.unsplash.com/photo-1603302576837-37561b2e2302",
        "price": Decimal("34999.99"),
        "description": "High-performance gaming laptop with RTX 4070, 32GB RAM, and 1TB SSD",
        "quantity": 15,
        "created_at": datetime(2025, 9, 21, 14, 0, 0),
    },
    {
        "name": "Wireless Bluetooth Headphones",
        "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e",
        "price": Decimal("2499.00"),
        "description": "Premium noise-cancelling headphones with 30-hour battery life",
        "quantity": 45,
        "created_at": datetime(2025, 9, 26, 14, 0, 0),
    },
    {
        "name": '4K Ultra HD Monitor 32"',
        "image_url": "https://images.unsplash.com/photo-1527443224154-c4a3942d3acf",
        "price": Decimal("12999.00"),
        "description": "Professional 4K monitor with HDR support and 144Hz refresh rate",
        "quantity": 8,
        "created_at": datetime(2025, 10, 1, 14, 0, 0),
    },
    {
        "name": "Mechanical Gaming Keyboard RGB",
        "image_url": "https://images.unsplash.com/photo-1587829741301-dc798b83add3",
        "price": Decimal("3299.00"),
        "description": "RGB mechanical keyboard with Cherry MX switches",
        "quantity": 32,
        "created_at": datetime(2025, 10, 6, 14, 0, 0),
    },
    {
        "name": "Smartphone Pro Max 256GB",
        "image_url": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9",
        "price": Decimal("28999.00"),
        "description": "Latest flagship smartphone with advanced camera system",
        "quantity": 22,
        "created_at": datetime(2025, 10, 11, 14, 0, 0),
    },
]


async def seed_sample_products(
    session_maker: async_sessionmaker[AsyncSession],
) -> int:
    """Insert the sample catalog when the products table is empty.

    Returns the number of products inserted.
    """
    async with session_maker() as session:
        repository = ProductRepository(session)
        if await repository.count() > 0:
            logger.info("Catalog already populated, skipping seed")
            return 0

        for data in SAMPLE_PRODUCTS:
            session.add(Product(updated_at=data["created_at"], **data))
        await session.commit()

    logger.info("Seeded sample catalog", extra={"products": len(SAMPLE_PRODUCTS)})
    return len(SAMPLE_PRODUCTS)
