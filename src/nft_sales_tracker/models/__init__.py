# -*- coding: utf-8 -*-
"""Domain models."""

from nft_sales_tracker.models.chain import (
    TRANSFER_TOPIC,
    ReceiptLog,
    TransactionContext,
    TransactionInfo,
    TransactionReceipt,
    TransferEvent,
)
from nft_sales_tracker.models.dedup_entry import DedupEntry
from nft_sales_tracker.models.sale import (
    Currency,
    SaleCandidate,
    SaleRecord,
    format_units,
)
from nft_sales_tracker.models.token_metadata import SaleMetadata, TokenMetadata, Trait

__all__ = [
    "TRANSFER_TOPIC",
    "Currency",
    "DedupEntry",
    "ReceiptLog",
    "SaleCandidate",
    "SaleMetadata",
    "SaleRecord",
    "TokenMetadata",
    "Trait",
    "TransactionContext",
    "TransactionInfo",
    "TransactionReceipt",
    "TransferEvent",
    "format_units",
]
