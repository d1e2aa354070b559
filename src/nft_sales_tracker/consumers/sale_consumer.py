# -*- coding: utf-8 -*-
"""Consumer that reads sale messages from the sale channel and publishes them on the event bus.

Same lifecycle as the other long-running workers: start()/stop() or
async with. queue.get() blocks, so the loop ends on QueueShutdown (after
channel.shutdown()) or on task cancellation.
"""

from __future__ import annotations

import asyncio
import structlog
from types import TracebackType
from typing import TYPE_CHECKING, Any, Callable, Optional, Type

from nft_sales_tracker.events.sales import SaleDetectedEvent
from nft_sales_tracker.exceptions import QueueShutdown

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from nft_sales_tracker.queue.channel import SaleChannel, SaleMessage


class SaleConsumer:
    """Takes SaleRecords off the sale channel and dispatches a SaleDetectedEvent for each."""

    def __init__(
        self,
        channel: "SaleChannel",
        event_bus: Any,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the consumer.

        Args:
            channel: Sale channel (same instance the ChainListener publishes on).
            event_bus: bubus EventBus the SaleDetectedEvent is dispatched on.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._channel = channel
        self._event_bus: "EventBus" = event_bus
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._running = False
        self._lock = asyncio.Lock()
        self._worker_task: Optional[asyncio.Task[None]] = None
        self._published = 0

    @property
    def published_count(self) -> int:
        return self._published

    async def __aenter__(self) -> SaleConsumer:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> bool:
        await self.stop()
        return False

    async def start(self) -> None:
        """Start the consumer in a background task. Idempotent."""
        async with self._lock:
            if self._running:
                return
            self._running = True
            self._worker_task = asyncio.create_task(self._consume_loop())

    async def stop(self) -> None:
        """Stop the consumer: cancel the task and wait for it to finish. Idempotent."""
        async with self._lock:
            if not self._running:
                return
            self._running = False
            task = self._worker_task
            self._worker_task = None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def publish(self, message: "SaleMessage") -> None:
        """Dispatch one SaleDetectedEvent and wait for its handlers. Handler errors are logged."""
        event = SaleDetectedEvent(sale=message.payload, message_id=str(message.id))
        try:
            await self._event_bus.dispatch(event)
        except Exception as e:
            self._logger.exception(
                "sale_publish_failed",
                message_id=str(message.id),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return
        self._published += 1
        self._logger.debug(
            "sale_published",
            message_id=str(message.id),
            transaction_hash=message.payload.transaction_hash,
            token_id=message.payload.token_id,
            dedup_key=message.meta("dedup_key"),
            block_number=message.meta("block_number"),
            queued_seconds=round(message.age_seconds(), 3),
        )

    async def _consume_loop(self) -> None:
        """Inner loop: get message, publish, task_done. Exits on QueueShutdown or cancel."""
        self._logger.debug("sale_consumer_started")
        try:
            while True:
                message = await self._channel.get()
                try:
                    await self.publish(message)
                finally:
                    self._channel.task_done()
        except QueueShutdown:
            self._logger.info(
                "sale_consumer_stopped",
                reason="queue_shutdown",
                published_count=self._published,
            )
        except asyncio.CancelledError:
            self._logger.debug("sale_consumer_cancelled")
            raise
        finally:
            async with self._lock:
                self._running = False
                self._worker_task = None
