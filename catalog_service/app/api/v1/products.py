"""Product API endpoints, version 1 (synchronous)"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from ...schemas.common import ApiResponse
from ...schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductStockUpdate,
    StockUpdateResult,
)
from ...services.product_service import ProductService
from ...utils.logging import setup_catalog_logging as setup_logging
from ..dependencies import ProductServiceDep

logger = setup_logging("catalog_service.api.v1.products")
router = APIRouter(prefix="/products")


@router.get("", response_model=ApiResponse[List[ProductResponse]])
async def get_all_products(service: ProductService = ProductServiceDep):
    """Get all products, newest first"""
    logger.info("GET /api/v1/products")
    products = await service.get_all_products()
    return ApiResponse[List[ProductResponse]].success_response(
        [ProductResponse.model_validate(p) for p in products]
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(product_id: int, service: ProductService = ProductServiceDep):
    """Get product details by ID"""
    logger.info("GET /api/v1/products/{id}", extra={"product_id": product_id})
    product = await service.get_product_by_id(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    return ApiResponse[ProductResponse].success_response(
        ProductResponse.model_validate(product), "Product retrieved successfully"
    )


@router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    product_data: ProductCreate, service: ProductService = ProductServiceDep
):
    """Create a new product"""
    logger.info("POST /api/v1/products")
    product = await service.create_product(
        name=product_data.name,
        image_url=product_data.image_url,
        price=product_data.price,
        description=product_data.description,
        quantity=product_data.quantity,
    )
    return ApiResponse[ProductResponse].success_response(
        ProductResponse.model_validate(product), "Product created successfully"
    )


@router.patch("/{product_id}/stock", response_model=ApiResponse[StockUpdateResult])
async def update_product_stock(
    product_id: int,
    stock_data: ProductStockUpdate,
    service: ProductService = ProductServiceDep,
):
    """Update product stock immediately"""
    logger.info("PATCH /api/v1/products/{id}/stock", extra={"product_id": product_id})

    success = await service.update_product_stock(product_id, stock_data.quantity)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    return ApiResponse[StockUpdateResult].success_response(
        StockUpdateResult(product_id=product_id, quantity=stock_data.quantity),
        "Stock updated successfully",
    )
