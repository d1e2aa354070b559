# -*- coding: utf-8 -*-
"""SaleNotifier: listens to SaleDetectedEvent and sends a sale notification."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from nft_sales_tracker.events.sales import SaleDetectedEvent
from nft_sales_tracker.notifications.types import NotificationMessage

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from nft_sales_tracker.models.sale import SaleRecord
    from nft_sales_tracker.notifications.notification_manager import NotificationService


def build_sale_message(sale: "SaleRecord") -> NotificationMessage:
    """NotificationMessage for one sale; the payload carries the full record."""
    currency = sale.currency.value
    if sale.is_bulk_sale:
        text = (
            f"{sale.transfer_count} items sold for {sale.total_price} {currency} "
            f"({sale.price_per_item} {currency} each)"
        )
    else:
        text = f"#{sale.display_token_id} sold for {sale.total_price} {currency}"
    return NotificationMessage(
        event_type="sale_detected",
        message=text,
        title=f"{sale.marketplace} sale",
        payload={"sale": sale.to_dict()},
    )


class SaleNotifier:
    """Subscribes to SaleDetectedEvent and forwards each sale to NotificationService."""

    def __init__(
        self,
        notification_service: "NotificationService",
        event_bus: Any,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._notification_service = notification_service
        self._event_bus: "EventBus" = event_bus
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def start(self) -> None:
        """Subscribe to SaleDetectedEvent."""
        self._event_bus.on(SaleDetectedEvent, self._on_sale)
        self._logger.debug("sale_notifier_started")

    def stop(self) -> None:
        """Unsubscribe from SaleDetectedEvent."""
        key = SaleDetectedEvent.__name__
        handlers = getattr(self._event_bus, "handlers", {})
        if key in handlers:
            handlers[key] = [h for h in handlers[key] if h != self._on_sale]
        self._logger.debug("sale_notifier_stopped")

    def _on_sale(self, event: SaleDetectedEvent) -> None:
        sale = event.sale
        queued = self._notification_service.notify(build_sale_message(sale))
        self._logger.debug(
            "sale_notified",
            message_id=event.message_id,
            transaction_hash=sale.transaction_hash,
            token_id=sale.token_id,
            queued=queued,
        )
