"""
Pytest configuration and fixtures for catalog service tests.
"""

import os
from datetime import datetime, timedelta
from typing import Any, AsyncGenerator, Callable, Iterator

import httpx
import pytest

# Set up test environment variables before importing anything else
os.environ.setdefault("APP_NAME", "Catalog Service Test")
os.environ.setdefault("APP_VERSION", "2.0.0")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("CATALOG_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STOCK_QUEUE_PROCESSOR_ENABLED", "false")
os.environ.setdefault("SEED_SAMPLE_DATA", "false")

from catalog_service.app.core.database import CatalogDatabaseManager  # noqa: E402
from catalog_service.app.core.settings import CatalogSettings  # noqa: E402
from catalog_service.app.main import create_app  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def database_manager() -> AsyncGenerator[CatalogDatabaseManager, None]:
    """Fresh in-memory database with the catalog schema."""
    manager = CatalogDatabaseManager(database_url=TEST_DATABASE_URL, echo=False)
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(database_manager: CatalogDatabaseManager) -> AsyncGenerator[Any, None]:
    """Database session with proper cleanup."""
    async with database_manager.async_session_maker() as session:
        yield session


@pytest.fixture
def test_settings() -> CatalogSettings:
    return CatalogSettings(
        CATALOG_DATABASE_URL=TEST_DATABASE_URL,
        STOCK_QUEUE_PROCESSOR_ENABLED=False,
        SEED_SAMPLE_DATA=False,
    )


@pytest.fixture
def app(test_settings: CatalogSettings, database_manager: CatalogDatabaseManager):
    """FastAPI application bound to the test database, processor not started."""
    return create_app(app_settings=test_settings, db_manager=database_manager)


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client running requests through the app with its lifespan active."""
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(
            transport=transport, base_url="http://testserver"
        ) as http_client:
            yield http_client


@pytest.fixture
def ticking_clock() -> Callable[[], datetime]:
    """Clock returning strictly increasing timestamps, one hour apart."""

    def _ticks() -> Iterator[datetime]:
        current = datetime(2025, 10, 1, 12, 0, 0)
        while True:
            yield current
            current += timedelta(hours=1)

    ticks = _ticks()
    return lambda: next(ticks)
