# -*- coding: utf-8 -*-
"""Event bus and event types."""

from nft_sales_tracker.events.bus import get_event_bus, set_event_bus
from nft_sales_tracker.events.sales import SaleDetectedEvent

__all__ = ["get_event_bus", "set_event_bus", "SaleDetectedEvent"]
