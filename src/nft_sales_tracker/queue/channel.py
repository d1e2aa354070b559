"""The sale channel: the one typed queue the listener publishes SaleRecords on."""

from __future__ import annotations

from typing import TypeAlias

from nft_sales_tracker.models.sale import SaleRecord
from nft_sales_tracker.queue.base import IAsyncQueue
from nft_sales_tracker.queue.in_memory_queue import InMemoryQueue
from nft_sales_tracker.queue.messages import QueueMessage

SaleMessage: TypeAlias = QueueMessage[SaleRecord]
SaleChannel: TypeAlias = IAsyncQueue[SaleMessage]


def build_sale_channel(maxsize: int = 0) -> SaleChannel:
    """Build an in-memory sale channel (0 = unbounded)."""
    return InMemoryQueue[SaleMessage](maxsize=maxsize)
