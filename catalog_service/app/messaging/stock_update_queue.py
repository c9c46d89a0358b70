"""
In-memory stock update queue
============================

Producer/consumer boundary between the v2 API (many concurrent producers) and
the background queue processor (single consumer). Strict FIFO, unbounded,
never blocks either side.
"""

import threading
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from typing import Deque, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import ProductValidationError
from ..models.base import utc_now


class StockUpdateRequest(BaseModel):
    """A pending absolute stock change for one product"""

    model_config = ConfigDict(frozen=True)

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0)
    requested_at: datetime = Field(default_factory=utc_now)


class StockUpdateQueue(ABC):
    """Interface for the stock update queue"""

    @abstractmethod
    async def enqueue(self, request: StockUpdateRequest) -> int:
        """Append a request; returns the queue size observed right after the append"""

    @abstractmethod
    async def dequeue(self) -> Optional[StockUpdateRequest]:
        """Remove and return the head request, or None when empty"""

    @property
    @abstractmethod
    def size(self) -> int:
        """Current number of pending requests (advisory)"""


class InMemoryStockUpdateQueue(StockUpdateQueue):
    """Thread-safe FIFO queue held in process memory. Items are lost on shutdown."""

    def __init__(self) -> None:
        self._items: Deque[StockUpdateRequest] = deque()
        self._lock = threading.Lock()

    async def enqueue(self, request: StockUpdateRequest) -> int:
        if request is None:
            raise ProductValidationError(
                "Stock update request is required", field="request"
            )
        with self._lock:
            self._items.append(request)
            return len(self._items)

    async def dequeue(self) -> Optional[StockUpdateRequest]:
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    @property
    def size(self) -> int:
        return len(self._items)
