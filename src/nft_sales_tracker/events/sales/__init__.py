# -*- coding: utf-8 -*-
"""Sale events."""

from nft_sales_tracker.events.sales.sale_events import SaleDetectedEvent

__all__ = ["SaleDetectedEvent"]
