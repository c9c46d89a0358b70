"""
Unit tests for the background stock update queue processor.
"""

import asyncio
from typing import Optional
from unittest.mock import AsyncMock, Mock

import pytest

from catalog_service.app.messaging.queue_processor import (
    DrainSummary,
    ProcessorState,
    StockUpdateQueueProcessor,
)
from catalog_service.app.messaging.stock_update_handler import StockUpdateHandler
from catalog_service.app.messaging.stock_update_queue import (
    InMemoryStockUpdateQueue,
    StockUpdateRequest,
)


async def _wait_until(predicate, timeout: float = 2.0) -> None:
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


class FlakyQueue(InMemoryStockUpdateQueue):
    """Queue whose first dequeue blows up"""

    def __init__(self) -> None:
        super().__init__()
        self.failures_left = 1

    async def dequeue(self) -> Optional[StockUpdateRequest]:
        if self.failures_left:
            self.failures_left -= 1
            raise RuntimeError("queue backend unavailable")
        return await super().dequeue()


class TestStockUpdateQueueProcessor:
    """Test cases for StockUpdateQueueProcessor"""

    @pytest.fixture
    def queue(self):
        return InMemoryStockUpdateQueue()

    @pytest.fixture
    def mock_handler(self):
        handler = Mock(spec=StockUpdateHandler)
        handler.handle = AsyncMock(return_value=True)
        return handler

    @pytest.fixture
    def processor(self, queue, mock_handler):
        return StockUpdateQueueProcessor(queue, mock_handler, processing_interval=0.01)

    async def _enqueue(self, queue, *product_ids: int, quantity: int = 5) -> None:
        for product_id in product_ids:
            await queue.enqueue(
                StockUpdateRequest(product_id=product_id, quantity=quantity)
            )

    # Construction
    def test_requires_queue(self, mock_handler):
        with pytest.raises(ValueError):
            StockUpdateQueueProcessor(None, mock_handler)

    @pytest.mark.parametrize("interval", [0, -1.5])
    def test_requires_positive_interval(self, queue, mock_handler, interval):
        with pytest.raises(ValueError):
            StockUpdateQueueProcessor(queue, mock_handler, processing_interval=interval)

    def test_initial_state_is_stopped(self, processor):
        assert processor.state == ProcessorState.STOPPED
        assert not processor.is_running

    # process_queue
    @pytest.mark.asyncio
    async def test_empty_queue_does_nothing(self, processor, mock_handler):
        summary = await processor.process_queue()

        assert summary == DrainSummary()
        mock_handler.handle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_drains_queue_in_fifo_order(self, processor, queue, mock_handler):
        # Arrange
        await self._enqueue(queue, 3, 1, 2)

        # Act
        summary = await processor.process_queue()

        # Assert
        assert [c.args[0] for c in mock_handler.handle.await_args_list] == [3, 1, 2]
        assert summary.processed == 3
        assert summary.succeeded == 3
        assert summary.failed == 0
        assert queue.size == 0

    @pytest.mark.asyncio
    async def test_failing_item_does_not_stop_the_drain(
        self, processor, queue, mock_handler
    ):
        # Arrange
        mock_handler.handle.side_effect = [True, RuntimeError("database down"), True]
        await self._enqueue(queue, 1, 2, 3)

        # Act
        summary = await processor.process_queue()

        # Assert
        assert mock_handler.handle.await_count == 3
        assert summary.processed == 3
        assert summary.succeeded == 2
        assert summary.failed == 1
        assert queue.size == 0

    @pytest.mark.asyncio
    async def test_unapplied_update_counts_as_failure(
        self, processor, queue, mock_handler
    ):
        mock_handler.handle.side_effect = [False, True]
        await self._enqueue(queue, 999, 1)

        summary = await processor.process_queue()

        assert summary.failed == 1
        assert summary.succeeded == 1

    @pytest.mark.asyncio
    async def test_failed_items_are_not_requeued(self, processor, queue, mock_handler):
        mock_handler.handle.side_effect = RuntimeError("boom")
        await self._enqueue(queue, 1)

        await processor.process_queue()
        await processor.process_queue()

        assert mock_handler.handle.await_count == 1
        assert queue.size == 0

    @pytest.mark.asyncio
    async def test_missing_handler_leaves_items_queued(self, queue):
        processor = StockUpdateQueueProcessor(queue, None, processing_interval=0.01)
        await self._enqueue(queue, 1, 2)

        summary = await processor.process_queue()

        assert summary.processed == 0
        assert queue.size == 2

    # process_item
    @pytest.mark.asyncio
    async def test_process_item_reports_exception(self, processor, mock_handler):
        mock_handler.handle.side_effect = RuntimeError("database down")
        request = StockUpdateRequest(product_id=1, quantity=5)

        outcome = await processor.process_item(request)

        assert not outcome.success
        assert outcome.request is request
        assert "database down" in outcome.error

    @pytest.mark.asyncio
    async def test_process_item_success(self, processor, mock_handler):
        request = StockUpdateRequest(product_id=7, quantity=50)

        outcome = await processor.process_item(request)

        assert outcome.success
        assert outcome.error is None
        mock_handler.handle.assert_awaited_once_with(7, 50)

    # Lifecycle
    @pytest.mark.asyncio
    async def test_running_processor_applies_queued_updates(
        self, processor, queue, mock_handler
    ):
        await processor.start()
        try:
            assert processor.is_running
            await self._enqueue(queue, 1, 2)

            await _wait_until(lambda: mock_handler.handle.await_count == 2)

            assert queue.size == 0
        finally:
            await processor.stop()

        assert processor.state == ProcessorState.STOPPED

    @pytest.mark.asyncio
    async def test_start_twice_keeps_single_worker(self, processor):
        await processor.start()
        task = processor._task
        await processor.start()

        assert processor._task is task
        await processor.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start_is_harmless(self, processor):
        await processor.stop()
        assert processor.state == ProcessorState.STOPPED

    @pytest.mark.asyncio
    async def test_stop_interrupts_the_interval_sleep(self, queue, mock_handler):
        processor = StockUpdateQueueProcessor(
            queue, mock_handler, processing_interval=60
        )
        await processor.start()
        await asyncio.sleep(0.01)

        await asyncio.wait_for(processor.stop(), timeout=1.0)

        assert processor.state == ProcessorState.STOPPED

    @pytest.mark.asyncio
    async def test_stop_lets_in_flight_item_finish(self, processor, queue, mock_handler):
        # Arrange
        started = asyncio.Event()
        release = asyncio.Event()
        handled = []

        async def slow_handle(product_id, quantity):
            handled.append(product_id)
            started.set()
            await release.wait()
            return True

        mock_handler.handle.side_effect = slow_handle
        await self._enqueue(queue, 1, 2, 3)

        # Act
        await processor.start()
        await asyncio.wait_for(started.wait(), timeout=1.0)
        stop_task = asyncio.create_task(processor.stop())
        await asyncio.sleep(0)
        assert processor.state == ProcessorState.STOPPING
        release.set()
        await asyncio.wait_for(stop_task, timeout=1.0)

        # Assert
        assert handled == [1]
        assert queue.size == 2
        assert processor.state == ProcessorState.STOPPED

    @pytest.mark.asyncio
    async def test_stop_cancels_worker_after_timeout(self, queue, mock_handler):
        started = asyncio.Event()

        async def stuck_handle(product_id, quantity):
            started.set()
            await asyncio.sleep(60)
            return True

        mock_handler.handle.side_effect = stuck_handle
        processor = StockUpdateQueueProcessor(
            queue, mock_handler, processing_interval=0.01, shutdown_timeout=0.05
        )
        await self._enqueue(queue, 1)

        await processor.start()
        await asyncio.wait_for(started.wait(), timeout=1.0)
        await asyncio.wait_for(processor.stop(), timeout=1.0)

        assert processor.state == ProcessorState.STOPPED

    @pytest.mark.asyncio
    async def test_cycle_error_does_not_kill_the_worker(self, mock_handler):
        queue = FlakyQueue()
        processor = StockUpdateQueueProcessor(
            queue, mock_handler, processing_interval=0.01
        )
        await queue.enqueue(StockUpdateRequest(product_id=1, quantity=5))

        await processor.start()
        try:
            await _wait_until(lambda: mock_handler.handle.await_count == 1)
        finally:
            await processor.stop()

        mock_handler.handle.assert_awaited_once_with(1, 5)
