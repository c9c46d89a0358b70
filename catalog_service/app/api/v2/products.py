"""Product API endpoints, version 2 (paginated listing, queued stock updates)"""

from fastapi import APIRouter, HTTPException, Query, status

from ...core.exceptions import ProductValidationError
from ...core.settings import get_settings
from ...messaging.stock_update_queue import StockUpdateQueue, StockUpdateRequest
from ...schemas.common import ApiResponse, PagedResult
from ...schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductStockUpdate,
    StockUpdateAccepted,
)
from ...services.product_service import ProductService, normalize_page
from ...utils.logging import setup_catalog_logging as setup_logging
from ..dependencies import ProductServiceDep, StockUpdateQueueDep

logger = setup_logging("catalog_service.api.v2.products")
router = APIRouter(prefix="/products")


@router.get("", response_model=ApiResponse[PagedResult[ProductResponse]])
async def get_products(
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
    service: ProductService = ProductServiceDep,
):
    """Get one page of products, newest first (page size capped at 100)"""
    logger.info(
        "GET /api/v2/products",
        extra={"page_number": page_number, "page_size": page_size},
    )

    settings = get_settings()
    page_number, page_size = normalize_page(
        page_number,
        page_size,
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )
    items, total_count, total_pages = await service.get_paged_products(
        page_number, page_size
    )

    paged = PagedResult[ProductResponse](
        items=[ProductResponse.model_validate(p) for p in items],
        page_number=page_number,
        page_size=page_size,
        total_count=total_count,
        total_pages=total_pages,
    )
    return ApiResponse[PagedResult[ProductResponse]].success_response(
        paged, "Products retrieved successfully"
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(product_id: int, service: ProductService = ProductServiceDep):
    """Get product details by ID"""
    logger.info("GET /api/v2/products/{id}", extra={"product_id": product_id})
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
    logger.info("POST /api/v2/products")
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


@router.patch(
    "/{product_id}/stock",
    response_model=ApiResponse[StockUpdateAccepted],
    status_code=status.HTTP_202_ACCEPTED,
)
async def update_product_stock(
    product_id: int,
    stock_data: ProductStockUpdate,
    queue: StockUpdateQueue = StockUpdateQueueDep,
):
    """Queue a stock update; it is applied by the background processor"""
    logger.info(
        "PATCH /api/v2/products/{id}/stock (async queue)",
        extra={"product_id": product_id},
    )

    if product_id <= 0:
        raise ProductValidationError(
            f"Invalid product ID {product_id}", field="productId"
        )

    request = StockUpdateRequest(product_id=product_id, quantity=stock_data.quantity)
    queue_position = await queue.enqueue(request)

    logger.info(
        "Stock update queued",
        extra={"product_id": product_id, "queue_size": queue_position},
    )

    return ApiResponse[StockUpdateAccepted].success_response(
        StockUpdateAccepted(
            product_id=product_id,
            quantity=stock_data.quantity,
            queue_position=queue_position,
        ),
        "Stock update request accepted and queued for processing",
    )
