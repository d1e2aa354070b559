"""Exceptions raised by the sale channel queue."""

from __future__ import annotations

from nft_sales_tracker.exceptions.exceptions import NftSalesError


class QueueError(NftSalesError):
    """Base exception for queue operations."""


class QueueShutdown(QueueError):
    """Raised when the queue has been shut down."""
