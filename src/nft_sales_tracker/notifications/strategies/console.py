# -*- coding: utf-8 -*-
"""Console notifier (print-based)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from nft_sales_tracker.notifications.types import NotificationMessage
from nft_sales_tracker.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:  # pragma: no cover
    from nft_sales_tracker.config import Settings
    from nft_sales_tracker.notifications.types import NotificationStyler


class ConsoleNotifier(BaseNotificationStrategy):
    """Print rendered sale notifications to stdout."""

    def __init__(
        self,
        settings: "Settings",
        styler: Optional["NotificationStyler"] = None,
    ) -> None:
        super().__init__(settings)
        self._running = False
        self._styler = styler

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        if not self.is_running or not self.settings.console.enabled:
            return
        body = self._styler.render(message) if self._styler else message.message
        print(body, flush=True)
