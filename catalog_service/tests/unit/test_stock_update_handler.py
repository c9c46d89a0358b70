"""
Unit tests for ProductStockUpdateHandler.
"""

from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.app.core.exceptions import ProductValidationError
from catalog_service.app.messaging.stock_update_handler import (
    ProductStockUpdateHandler,
)

SERVICE_PATH = "catalog_service.app.messaging.stock_update_handler.ProductService"


class TestProductStockUpdateHandler:
    """Test cases for ProductStockUpdateHandler"""

    @pytest.fixture
    def mock_session(self):
        return Mock(spec=AsyncSession)

    @pytest.fixture
    def session_factory(self, mock_session):
        factory = MagicMock()
        factory.return_value.__aenter__.return_value = mock_session
        factory.return_value.__aexit__.return_value = False
        return factory

    @pytest.fixture
    def handler(self, session_factory):
        return ProductStockUpdateHandler(session_factory)

    @pytest.mark.asyncio
    async def test_applies_update_through_product_service(
        self, handler, session_factory, mock_session
    ):
        with patch(SERVICE_PATH) as service_cls:
            service_cls.return_value.update_product_stock = AsyncMock(return_value=True)

            result = await handler.handle(1, 50)

        assert result is True
        session_factory.assert_called_once_with()
        service_cls.assert_called_once_with(mock_session)
        service_cls.return_value.update_product_stock.assert_awaited_once_with(1, 50)

    @pytest.mark.asyncio
    async def test_unknown_product_returns_false(self, handler):
        with patch(SERVICE_PATH) as service_cls:
            service_cls.return_value.update_product_stock = AsyncMock(
                return_value=False
            )

            result = await handler.handle(999, 50)

        assert result is False

    @pytest.mark.asyncio
    async def test_validation_error_returns_false(self, handler):
        with patch(SERVICE_PATH) as service_cls:
            service_cls.return_value.update_product_stock = AsyncMock(
                side_effect=ProductValidationError(
                    "Quantity cannot be negative", field="quantity"
                )
            )

            result = await handler.handle(1, -5)

        assert result is False

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates(self, handler):
        with patch(SERVICE_PATH) as service_cls:
            service_cls.return_value.update_product_stock = AsyncMock(
                side_effect=RuntimeError("connection reset")
            )

            with pytest.raises(RuntimeError, match="connection reset"):
                await handler.handle(1, 5)

    @pytest.mark.asyncio
    async def test_each_call_opens_its_own_session(self, handler, session_factory):
        with patch(SERVICE_PATH) as service_cls:
            service_cls.return_value.update_product_stock = AsyncMock(return_value=True)

            await handler.handle(1, 5)
            await handler.handle(2, 6)

        assert session_factory.call_count == 2
