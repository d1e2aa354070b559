"""Notification strategies."""

from nft_sales_tracker.notifications.strategies.base import (
    BaseNotificationStrategy,
)
from nft_sales_tracker.notifications.strategies.console import ConsoleNotifier

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
]
