"""Queue consumers."""

from nft_sales_tracker.consumers.sale_consumer import SaleConsumer

__all__ = ["SaleConsumer"]
