"""Product repository for database operations"""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.product import Product


class ProductRepository:
    """Repository for product database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _newest_first():
        # id breaks ties between products created in the same instant
        return (Product.created_at.desc(), Product.id.desc())

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        query = select(Product).where(Product.id == product_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_all(self) -> Sequence[Product]:
        """Get all products, newest first"""
        query = select(Product).order_by(*self._newest_first())
        result = await self.db.execute(query)
        return result.scalars().all()

    async def count(self) -> int:
        """Count all products"""
        result = await self.db.execute(select(func.count()).select_from(Product))
        return int(result.scalar_one())

    async def get_paged(
        self, page_number: int, page_size: int
    ) -> Tuple[List[Product], int]:
        """Get one page of products (newest first) together with the total count"""
        total_count = await self.count()

        offset = (page_number - 1) * page_size
        if offset >= total_count:
            # Past the last page; the offset may not even fit the store's integer type
            return [], total_count

        query = (
            select(Product)
            .order_by(*self._newest_first())
            .offset(offset)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total_count

    async def add(self, product: Product) -> Product:
        """Persist a new product and return it with its assigned id"""
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def update(self, product: Product) -> Product:
        """Persist changes made to an already loaded product"""
        await self.db.commit()
        await self.db.refresh(product)
        return product
