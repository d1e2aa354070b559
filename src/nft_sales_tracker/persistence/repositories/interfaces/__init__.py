# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/, etc."""

from nft_sales_tracker.persistence.repositories.interfaces.dedup_repository import (
    IDedupRepository,
)

__all__ = ["IDedupRepository"]
