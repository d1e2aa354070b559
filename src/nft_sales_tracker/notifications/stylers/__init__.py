"""Notification stylers."""

from nft_sales_tracker.notifications.stylers.sale_styler import SaleNotificationStyler

__all__ = ["SaleNotificationStyler"]
