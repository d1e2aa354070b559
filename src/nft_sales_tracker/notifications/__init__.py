"""Notification subsystem."""

from nft_sales_tracker.notifications.notification_manager import (
    NotificationService,
)
from nft_sales_tracker.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
)
from nft_sales_tracker.notifications.stylers import SaleNotificationStyler
from nft_sales_tracker.notifications.types import (
    NotificationMessage,
    NotificationStyler,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "NotificationMessage",
    "NotificationService",
    "NotificationStyler",
    "SaleNotificationStyler",
]
