"""
Catalog Service FastAPI Application
===================================

Main application entry point for the Catalog Service.
Serves the product catalog in two API versions:
    - v1: synchronous CRUD
    - v2: paginated listing and asynchronous (queued) stock updates
and runs the background processor that drains the stock update queue.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.health import router as health_router
from .api.v1.products import router as products_v1_router
from .api.v2.products import router as products_v2_router
from .core.database import CatalogDatabaseManager, database_manager
from .core.seed import seed_sample_products
from .core.settings import CatalogSettings, get_settings
from .messaging.queue_processor import StockUpdateQueueProcessor
from .messaging.stock_update_handler import ProductStockUpdateHandler
from .messaging.stock_update_queue import InMemoryStockUpdateQueue
from .middleware.api.versioning import APIVersioningMiddleware
from .middleware.error.error_handler import setup_catalog_error_handling
from .utils.logging import setup_catalog_logging
from .utils.service_health import CatalogServiceHealthChecker, add_catalog_checks

settings = get_settings()
enable_file_logging = settings.ENVIRONMENT.lower() in ["production", "staging"]

logger = setup_catalog_logging(
    "catalog_service",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=enable_file_logging,
    log_dir=settings.LOG_DIR,
)


# Lifespan management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown."""
    startup_start = time.time()

    try:
        await _initialize_services(app, startup_start)
    except Exception as e:
        _handle_startup_error(startup_start, e)
        raise

    yield

    await _shutdown_services(app)


async def _initialize_services(app: FastAPI, startup_start: float) -> None:
    """Prepare the database and start the stock update processor."""
    app_settings: CatalogSettings = app.state.settings
    manager: CatalogDatabaseManager = app.state.database_manager

    logger.info(
        "Starting catalog service initialization",
        extra={
            "environment": app_settings.ENVIRONMENT,
            "debug_mode": app_settings.DEBUG,
            "service_version": app_settings.APP_VERSION,
        },
    )

    db_start = time.time()
    await manager.create_tables()
    if app_settings.SEED_SAMPLE_DATA:
        await seed_sample_products(manager.async_session_maker)
    db_duration = int((time.time() - db_start) * 1000)

    processor: StockUpdateQueueProcessor = app.state.stock_update_processor
    if app_settings.STOCK_QUEUE_PROCESSOR_ENABLED:
        await processor.start()
    else:
        logger.warning("Stock update queue processor disabled by configuration")

    logger.info(
        "Catalog service started successfully",
        extra={
            "total_startup_duration_ms": int((time.time() - startup_start) * 1000),
            "database_init_ms": db_duration,
            "processor_state": processor.state.value,
        },
    )


def _handle_startup_error(startup_start: float, error: Exception) -> None:
    logger.error(
        "Failed to start catalog service",
        exc_info=True,
        extra={
            "startup_duration_ms": int((time.time() - startup_start) * 1000),
            "error_type": type(error).__name__,
        },
    )


async def _shutdown_services(app: FastAPI) -> None:
    """Stop the processor (letting the in-flight item finish) and close the database."""
    shutdown_start = time.time()
    logger.info("Starting catalog service shutdown")

    try:
        await app.state.stock_update_processor.stop()
    finally:
        await app.state.database_manager.close()

    logger.info(
        "Catalog service shutdown completed",
        extra={"shutdown_duration_ms": int((time.time() - shutdown_start) * 1000)},
    )


# Application factory
def create_app(
    app_settings: Optional[CatalogSettings] = None,
    db_manager: Optional[CatalogDatabaseManager] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = app_settings or settings
    db_manager = db_manager or database_manager

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        debug=app_settings.DEBUG,
        lifespan=lifespan,
        openapi_url="/openapi.json" if app_settings.DEBUG else None,
        docs_url="/docs" if app_settings.DEBUG else None,
        redoc_url="/redoc" if app_settings.DEBUG else None,
    )

    app.state.settings = app_settings
    app.state.database_manager = db_manager
    _setup_stock_updates(app, app_settings, db_manager)
    _setup_health_checks(app)

    _setup_middleware(app)
    _setup_cors(app, app_settings)
    _setup_routers(app)

    return app


def _setup_stock_updates(
    app: FastAPI, app_settings: CatalogSettings, db_manager: CatalogDatabaseManager
) -> None:
    """Wire the single queue instance shared by the v2 API and the processor."""
    queue = InMemoryStockUpdateQueue()
    handler = ProductStockUpdateHandler(db_manager.async_session_maker)
    app.state.stock_update_queue = queue
    app.state.stock_update_processor = StockUpdateQueueProcessor(
        queue,
        handler,
        processing_interval=app_settings.STOCK_QUEUE_PROCESSING_INTERVAL,
        shutdown_timeout=app_settings.STOCK_QUEUE_SHUTDOWN_TIMEOUT,
    )


def _setup_health_checks(app: FastAPI) -> None:
    checker = CatalogServiceHealthChecker(app.state.settings.SERVICE_NAME)
    add_catalog_checks(
        checker,
        app.state.database_manager,
        app.state.stock_update_queue,
        app.state.stock_update_processor,
    )
    app.state.health_checker = checker


def _setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        APIVersioningMiddleware, default_version="1.0", supported_versions=["1.0", "2.0"]
    )
    setup_catalog_error_handling(app)
    logger.info("Middleware configured")


def _setup_cors(app: FastAPI, app_settings: CatalogSettings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=app_settings.CORS_CREDENTIALS,
        allow_methods=app_settings.CORS_METHODS,
        allow_headers=app_settings.CORS_HEADERS,
    )


def _setup_routers(app: FastAPI) -> None:
    routers_info: List[dict[str, Any]] = []

    app.include_router(health_router, tags=["Health"])
    routers_info.append({"router": "health", "prefix": ""})

    app.include_router(products_v1_router, prefix="/api/v1", tags=["Products v1"])
    routers_info.append({"router": "products_v1", "prefix": "/api/v1"})

    app.include_router(products_v2_router, prefix="/api/v2", tags=["Products v2"])
    routers_info.append({"router": "products_v2", "prefix": "/api/v2"})

    logger.info(
        "API routes configured",
        extra={"total_routers": len(routers_info), "routers": routers_info},
    )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(  # type: ignore
        "catalog_service.app.main:app",
        host="0.0.0.0",
        port=8002,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )
