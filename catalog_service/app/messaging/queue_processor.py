"""
Stock update queue processor
============================

Long-lived background task that wakes up on a fixed interval, drains every
pending stock update from the queue and applies it through a handler.

Failures are isolated at two levels:
    - per item: a failing update becomes a failed StockUpdateOutcome and the
      drain continues with the next item; the failed item is dropped, not retried
    - per cycle: an unexpected error while draining is logged and the worker
      moves on to the next interval

Stopping lets the in-flight item finish; items still queued are not flushed.
"""

import asyncio
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..core.settings import get_settings
from ..utils.logging import setup_catalog_logging as setup_logging
from .stock_update_handler import StockUpdateHandler
from .stock_update_queue import StockUpdateQueue, StockUpdateRequest

logger = setup_logging(
    "catalog_service.messaging.processor", log_level=get_settings().LOG_LEVEL
)

DEFAULT_PROCESSING_INTERVAL = 2.0


class ProcessorState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    STOPPING = "stopping"


@dataclass(frozen=True)
class StockUpdateOutcome:
    """Result of applying a single queued stock update"""

    request: StockUpdateRequest
    success: bool
    error: Optional[str] = None


@dataclass
class DrainSummary:
    """Counters for one drain cycle"""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0

    def record(self, outcome: StockUpdateOutcome) -> None:
        self.processed += 1
        if outcome.success:
            self.succeeded += 1
        else:
            self.failed += 1

    def as_log_extra(self) -> Dict[str, Any]:
        return {
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }


class StockUpdateQueueProcessor:
    """Background worker that applies queued stock updates in FIFO order"""

    def __init__(
        self,
        queue: StockUpdateQueue,
        handler: Optional[StockUpdateHandler],
        processing_interval: float = DEFAULT_PROCESSING_INTERVAL,
        shutdown_timeout: float = 10.0,
    ):
        if queue is None:
            raise ValueError("queue is required")
        if processing_interval <= 0:
            raise ValueError("processing_interval must be positive")

        self.queue = queue
        self.handler = handler
        self.processing_interval = processing_interval
        self.shutdown_timeout = shutdown_timeout

        self._state = ProcessorState.STOPPED
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ProcessorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == ProcessorState.RUNNING

    async def start(self) -> None:
        """Start the polling loop as a background task"""
        if self._task is not None and not self._task.done():
            return

        self._stop_event = asyncio.Event()
        self._state = ProcessorState.RUNNING
        self._task = asyncio.create_task(
            self._run(), name="stock-update-queue-processor"
        )

    async def stop(self) -> None:
        """Signal the loop to stop and wait for the in-flight item to finish"""
        if self._task is None:
            self._state = ProcessorState.STOPPED
            return

        self._state = ProcessorState.STOPPING
        if self._stop_event is not None:
            self._stop_event.set()

        try:
            await asyncio.wait_for(asyncio.shield(self._task), self.shutdown_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Stock update queue processor did not stop in time, cancelling",
                extra={"shutdown_timeout_seconds": self.shutdown_timeout},
            )
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
        finally:
            self._task = None
            self._state = ProcessorState.STOPPED

        if self.queue.size:
            logger.warning(
                "Stock updates left in queue at shutdown were discarded",
                extra={"queue_size": self.queue.size},
            )

    def _stop_requested(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    async def _run(self) -> None:
        logger.info(
            "Stock update queue processor started",
            extra={"interval_seconds": self.processing_interval},
        )
        try:
            while not self._stop_requested():
                try:
                    await self.process_queue()
                except Exception:
                    logger.error("Error processing stock update queue", exc_info=True)

                await self._wait_for_next_cycle()
        finally:
            self._state = ProcessorState.STOPPED
            logger.info("Stock update queue processor stopped")

    async def _wait_for_next_cycle(self) -> None:
        """Sleep one interval, waking early when a stop is requested"""
        if self._stop_event is None:
            await asyncio.sleep(self.processing_interval)
            return
        try:
            await asyncio.wait_for(
                self._stop_event.wait(), timeout=self.processing_interval
            )
        except asyncio.TimeoutError:
            return

    async def process_queue(self) -> DrainSummary:
        """Drain the queue until it is empty or a stop is requested"""
        summary = DrainSummary()

        pending = self.queue.size
        if pending == 0:
            return summary

        if self.handler is None:
            logger.warning(
                "No stock update handler configured, queued items will not be processed",
                extra={"queue_size": pending},
            )
            return summary

        logger.info("Processing stock update queue", extra={"queue_size": pending})

        while self.queue.size > 0 and not self._stop_requested():
            request = await self.queue.dequeue()
            if request is None:
                break
            summary.record(await self.process_item(request))

        logger.info("Stock update drain cycle finished", extra=summary.as_log_extra())
        return summary

    async def process_item(self, request: StockUpdateRequest) -> StockUpdateOutcome:
        """Apply one request; any failure is reported in the outcome, never raised"""
        if self.handler is None:
            return StockUpdateOutcome(request, success=False, error="no handler")

        extra = {
            "product_id": request.product_id,
            "quantity": request.quantity,
            "requested_at": request.requested_at.isoformat(),
        }
        logger.info("Processing stock update", extra=extra)

        try:
            success = await self.handler.handle(request.product_id, request.quantity)
        except Exception as e:
            logger.error("Error updating stock", extra=extra, exc_info=True)
            return StockUpdateOutcome(
                request, success=False, error=f"{type(e).__name__}: {e}"
            )

        if not success:
            logger.warning(
                "Stock update not applied - product not found or request rejected",
                extra=extra,
            )
            return StockUpdateOutcome(request, success=False, error="not applied")

        logger.info("Stock update applied", extra=extra)
        return StockUpdateOutcome(request, success=True)
