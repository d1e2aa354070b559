# -*- coding: utf-8 -*-
"""Async queue interface (protocol)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IAsyncQueue[T](ABC):
    """Abstract async queue used as the channel between producers and consumers.

    Blocking put/get, task_done/join accounting and shutdown. Both put and
    get raise QueueShutdown once the queue is closed (get only after draining).
    """

    @property
    @abstractmethod
    def maxsize(self) -> int:
        """Capacity; 0 means unbounded."""
        ...

    @abstractmethod
    async def put(self, item: T) -> None:
        """Put item, waiting for space when full.

        Raises:
            QueueShutdown: If the queue has been shut down.
        """
        ...

    @abstractmethod
    async def get(self) -> T:
        """Remove and return the next item, waiting until one is available.

        Raises:
            QueueShutdown: Once the queue is shut down and drained. Consumers exit on it.
        """
        ...

    @abstractmethod
    def task_done(self) -> None:
        """Mark the last item returned by get() as processed."""
        ...

    @abstractmethod
    def shutdown(self, immediate: bool = False) -> None:
        """Stop accepting items. With immediate=True pending items are dropped."""
        ...

    @abstractmethod
    async def join(self) -> None:
        """Wait until every item taken with get() has been marked task_done()."""
        ...

    @abstractmethod
    def qsize(self) -> int:
        """Return the number of queued items."""
        ...
