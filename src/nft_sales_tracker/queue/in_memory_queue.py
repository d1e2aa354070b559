# -*- coding: utf-8 -*-
"""asyncio.Queue-backed IAsyncQueue."""

from __future__ import annotations

import asyncio

from nft_sales_tracker.exceptions import QueueShutdown
from nft_sales_tracker.queue.base import IAsyncQueue


class InMemoryQueue[T](IAsyncQueue[T]):
    """Process-local queue; asyncio shutdown errors surface as QueueShutdown."""

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=maxsize)

    @property
    def maxsize(self) -> int:
        """Capacity; 0 means unbounded."""
        return self._queue.maxsize

    async def put(self, item: T) -> None:
        try:
            await self._queue.put(item)
        except asyncio.QueueShutDown as e:
            raise QueueShutdown("sale channel is shut down") from e

    async def get(self) -> T:
        try:
            return await self._queue.get()
        except asyncio.QueueShutDown as e:
            raise QueueShutdown("sale channel is shut down and drained") from e

    def task_done(self) -> None:
        self._queue.task_done()

    def qsize(self) -> int:
        return self._queue.qsize()

    def shutdown(self, immediate: bool = False) -> None:
        self._queue.shutdown(immediate)

    async def join(self) -> None:
        await self._queue.join()
