# -*- coding: utf-8 -*-
"""Application services."""

from nft_sales_tracker.services.classification import SaleClassifier
from nft_sales_tracker.services.dedup import DedupGuard
from nft_sales_tracker.services.listener import ChainListener
from nft_sales_tracker.services.metadata import MetadataResolver
from nft_sales_tracker.services.notifications import SaleNotifier
from nft_sales_tracker.services.receipts import ReceiptFetcher

__all__ = [
    "ChainListener",
    "DedupGuard",
    "MetadataResolver",
    "ReceiptFetcher",
    "SaleClassifier",
    "SaleNotifier",
]
