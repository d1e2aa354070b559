# -*- coding: utf-8 -*-
"""Sale deduplication."""

from nft_sales_tracker.services.dedup.dedup_guard import DedupGuard

__all__ = ["DedupGuard"]
