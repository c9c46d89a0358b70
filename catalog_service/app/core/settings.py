"""
Catalog Service configuration
"""

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the catalog service directory path
CATALOG_SERVICE_DIR = Path(__file__).parent.parent.parent
ENV_FILE = CATALOG_SERVICE_DIR / ".env"


class CatalogSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "E-Shop Catalog API"
    APP_VERSION: str = "2.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "catalog-service"

    # Database
    CATALOG_DATABASE_URL: str = "sqlite+aiosqlite:///./catalog.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    SEED_SAMPLE_DATA: bool = False

    # Asynchronous stock updates
    STOCK_QUEUE_PROCESSOR_ENABLED: bool = True
    STOCK_QUEUE_PROCESSING_INTERVAL: float = 2.0
    STOCK_QUEUE_SHUTDOWN_TIMEOUT: float = 10.0

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = False
    CORS_METHODS: List[str] = ["GET", "POST", "PATCH", "OPTIONS"]
    CORS_HEADERS: List[str] = ["*"]

    # Logging
    LOG_DIR: Optional[str] = None


# Create a singleton instance
_settings_instance = None


def get_settings() -> CatalogSettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = CatalogSettings()
    return _settings_instance
