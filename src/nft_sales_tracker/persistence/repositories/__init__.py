# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, etc.)."""

from nft_sales_tracker.persistence.repositories.interfaces import IDedupRepository
from nft_sales_tracker.persistence.repositories.in_memory import InMemoryDedupRepository

__all__ = ["IDedupRepository", "InMemoryDedupRepository"]
