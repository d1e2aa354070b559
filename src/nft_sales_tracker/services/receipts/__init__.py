# -*- coding: utf-8 -*-
"""Transaction and receipt lookups."""

from nft_sales_tracker.services.receipts.receipt_fetcher import ReceiptFetcher

__all__ = ["ReceiptFetcher"]
