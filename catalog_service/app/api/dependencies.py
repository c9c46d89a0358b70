"""
FastAPI dependency injection for Catalog Service

Provides database sessions, services, the shared stock update queue and
correlation ID extraction. Long-lived components live on ``app.state`` and are
wired by the application lifespan.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import CatalogDatabaseManager
from ..messaging.stock_update_queue import StockUpdateQueue
from ..services.product_service import ProductService

# =====================================================
# REQUEST CONTEXT DEPENDENCIES
# =====================================================


def get_correlation_id(request: Request) -> Optional[str]:
    """Extract correlation ID from request headers"""
    correlation_id = request.headers.get("X-Correlation-ID") or request.headers.get(
        "X-Request-ID"
    )
    request.state.correlation_id = correlation_id
    return correlation_id


# =====================================================
# DATABASE DEPENDENCIES
# =====================================================


def get_database_manager(request: Request) -> CatalogDatabaseManager:
    return request.app.state.database_manager


async def get_async_session(
    manager: CatalogDatabaseManager = Depends(get_database_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session"""
    async for session in manager.get_async_session():
        yield session


# =====================================================
# SERVICE DEPENDENCIES
# =====================================================


def get_product_service(
    session: AsyncSession = Depends(get_async_session),
    correlation_id: Optional[str] = Depends(get_correlation_id),
) -> ProductService:
    """Provide ProductService instance bound to the request session"""
    return ProductService(session, correlation_id=correlation_id)


def get_stock_update_queue(request: Request) -> StockUpdateQueue:
    """Provide the process-wide stock update queue"""
    return request.app.state.stock_update_queue


# =====================================================
# COMMON DEPENDENCY ALIASES
# =====================================================

CorrelationIdDep = Depends(get_correlation_id)
DatabaseDep = Depends(get_async_session)
ProductServiceDep = Depends(get_product_service)
StockUpdateQueueDep = Depends(get_stock_update_queue)
