from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ..models.base import CatalogServiceBase
from ..utils.logging import setup_catalog_logging as setup_logging
from .settings import get_settings

logger = setup_logging("catalog_service.database", log_level=get_settings().LOG_LEVEL)


def _mask_credentials(database_url: str) -> str:
    if "@" not in database_url:
        return database_url
    return database_url.split("@")[0].rsplit(":", 1)[0] + ":***@***"


class CatalogDatabaseManager:
    """Owns the async engine and session factory for the Catalog Service."""

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 20,
    ) -> None:
        self.database_url = database_url

        engine_kwargs: Dict[str, Any] = {"echo": echo, "future": True}

        if "sqlite" in database_url:
            engine_kwargs["connect_args"] = {
                "timeout": 60,
                "check_same_thread": False,
            }
            if ":memory:" in database_url:
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
            database_type = "sqlite"
        else:
            engine_kwargs.update(
                {
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                    "pool_timeout": 30,
                    "pool_recycle": 1800,
                    "pool_pre_ping": True,
                }
            )
            database_type = "postgresql"

        self.async_engine = create_async_engine(database_url, **engine_kwargs)
        self.async_session_maker = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info(
            "Catalog database manager initialized",
            extra={
                "operation": "database_manager_init",
                "database_url": _mask_credentials(database_url),
                "database_type": database_type,
                "echo": echo,
            },
        )

    async def create_tables(self) -> None:
        """Create all Catalog Service database tables."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(CatalogServiceBase.metadata.create_all, checkfirst=True)
        logger.info(
            "Database tables created",
            extra={"operation": "create_tables"},
        )

    async def drop_tables(self) -> None:
        """Drop all Catalog Service database tables."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(CatalogServiceBase.metadata.drop_all)
        logger.info("Database tables dropped", extra={"operation": "drop_tables"})

    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session."""
        async with self.async_session_maker() as session:
            yield session

    async def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        await self.async_engine.dispose()
        logger.info(
            "Catalog database connections closed",
            extra={"operation": "database_close"},
        )


settings = get_settings()
database_manager = CatalogDatabaseManager(
    database_url=settings.CATALOG_DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DATABASE_POOL_SIZE,
    max_overflow=settings.DATABASE_MAX_OVERFLOW,
)
