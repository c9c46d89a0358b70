"""
Asynchronous stock update messaging for the Catalog Service.

    - StockUpdateQueue / InMemoryStockUpdateQueue: FIFO producer/consumer boundary
    - StockUpdateHandler / ProductStockUpdateHandler: applies one update
    - StockUpdateQueueProcessor: background worker draining the queue
"""

from .queue_processor import (
    DrainSummary,
    ProcessorState,
    StockUpdateOutcome,
    StockUpdateQueueProcessor,
)
from .stock_update_handler import ProductStockUpdateHandler, StockUpdateHandler
from .stock_update_queue import (
    InMemoryStockUpdateQueue,
    StockUpdateQueue,
    StockUpdateRequest,
)

__all__ = [
    "DrainSummary",
    "InMemoryStockUpdateQueue",
    "ProcessorState",
    "ProductStockUpdateHandler",
    "StockUpdateHandler",
    "StockUpdateOutcome",
    "StockUpdateQueue",
    "StockUpdateQueueProcessor",
    "StockUpdateRequest",
]
