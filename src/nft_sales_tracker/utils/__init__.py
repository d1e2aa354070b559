# -*- coding: utf-8 -*-
"""Utility modules."""

from nft_sales_tracker.utils.dedupe import sale_key
from nft_sales_tracker.utils.validation import (
    hex_to_int,
    is_hex_address,
    is_tx_hash,
    mask_address,
    normalize_address,
    same_address,
    topic_to_address,
)

__all__ = [
    "hex_to_int",
    "is_hex_address",
    "is_tx_hash",
    "mask_address",
    "normalize_address",
    "same_address",
    "sale_key",
    "topic_to_address",
]
