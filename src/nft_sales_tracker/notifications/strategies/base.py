# -*- coding: utf-8 -*-
"""Base notification strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from nft_sales_tracker.notifications.types import NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from nft_sales_tracker.config.config import Settings


class BaseNotificationStrategy(ABC):
    """Abstract base for a delivery channel (console, chat webhook, ...)."""

    def __init__(self, settings: "Settings"):
        """
        Args:
            settings: Global configuration (Settings).
        """
        self.settings = settings

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether the channel is accepting notifications."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        pass

    @abstractmethod
    async def send_notification(
        self,
        message: NotificationMessage,
    ) -> None:
        """
        Deliver one notification.

        Args:
            message: Message to deliver (NotificationMessage)
        """
        pass
