"""Sale events dispatched on the bus by SaleConsumer."""

from __future__ import annotations

from bubus import BaseEvent  # type: ignore[import-untyped]

from nft_sales_tracker.models.sale import SaleRecord


class SaleDetectedEvent(BaseEvent[None]):
    """Emitted once per SaleRecord taken off the sale channel.

    Downstream formatters (console, Discord, social) subscribe with
    bus.on(SaleDetectedEvent, handler). Only emission order within one
    process is guaranteed, not chain order.
    """

    sale: SaleRecord
    message_id: str
    """Id of the sale channel message that carried the record."""
