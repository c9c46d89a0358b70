"""
Catalog Service Health Check Utilities
======================================

Health checks for the Catalog Service: database reachability and the state
of the asynchronous stock update pipeline.
"""

import time
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy import text

from ..core.database import CatalogDatabaseManager
from ..messaging.queue_processor import StockUpdateQueueProcessor
from ..messaging.stock_update_queue import StockUpdateQueue

HealthCheck = Callable[[], Awaitable[Dict[str, Any]]]


class CatalogServiceHealthChecker:
    """Runs named async health checks and aggregates the results"""

    def __init__(self, service_name: str = "catalog_service") -> None:
        self.service_name = service_name
        self.checks: Dict[str, HealthCheck] = {}
        self.start_time = time.time()

    def add_check(self, name: str, check_func: HealthCheck) -> None:
        """Add a health check function"""
        self.checks[name] = check_func

    async def run_checks(self) -> Dict[str, Any]:
        results = {}
        check_start_time = time.time()

        for name, check_func in self.checks.items():
            individual_start = time.time()
            try:
                result = await check_func()
            except Exception as e:
                result = {"status": "error", "error": str(e)}
            result["duration_ms"] = round((time.time() - individual_start) * 1000, 2)
            results[name] = result

        return {
            "service": self.service_name,
            "status": "healthy"
            if all(r.get("status") == "healthy" for r in results.values())
            else "unhealthy",
            "checks": results,
            "total_duration_ms": round((time.time() - check_start_time) * 1000, 2),
            "uptime_seconds": round(time.time() - self.start_time, 2),
            "timestamp": time.time(),
        }


def add_catalog_checks(
    checker: CatalogServiceHealthChecker,
    database_manager: CatalogDatabaseManager,
    queue: StockUpdateQueue,
    processor: StockUpdateQueueProcessor,
) -> None:
    """Register database and stock update pipeline checks"""

    async def database_check() -> Dict[str, Any]:
        async with database_manager.async_session_maker() as session:
            await session.execute(text("SELECT 1"))
        return {"status": "healthy", "component": "database"}

    async def stock_queue_check() -> Dict[str, Any]:
        return {
            "status": "healthy",
            "component": "stock_update_queue",
            "pending": queue.size,
            "processor_state": processor.state.value,
        }

    checker.add_check("database", database_check)
    checker.add_check("stock_update_queue", stock_queue_check)
