"""Notification services wired to bus events."""

from nft_sales_tracker.services.notifications.sale_notifier import (
    SaleNotifier,
    build_sale_message,
)

__all__ = ["SaleNotifier", "build_sale_message"]
