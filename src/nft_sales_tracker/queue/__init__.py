# -*- coding: utf-8 -*-
"""Async queue abstraction, implementations and the sale channel."""

from nft_sales_tracker.queue.base import IAsyncQueue
from nft_sales_tracker.queue.channel import SaleChannel, SaleMessage, build_sale_channel
from nft_sales_tracker.queue.in_memory_queue import InMemoryQueue
from nft_sales_tracker.queue.messages import QueueMessage

__all__ = [
    "IAsyncQueue",
    "InMemoryQueue",
    "QueueMessage",
    "SaleChannel",
    "SaleMessage",
    "build_sale_channel",
]
