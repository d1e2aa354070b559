"""Exceptions subpackage."""

from nft_sales_tracker.exceptions.exceptions import (
    HttpRequestError,
    MissingRequiredConfigError,
    NftSalesError,
    ReceiptFetchError,
    RpcError,
    SubscriptionError,
)
from nft_sales_tracker.exceptions.queue_exceptions import (
    QueueError,
    QueueShutdown,
)

__all__ = [
    "HttpRequestError",
    "MissingRequiredConfigError",
    "NftSalesError",
    "ReceiptFetchError",
    "RpcError",
    "SubscriptionError",
    "QueueError",
    "QueueShutdown",
]
