"""Persistence layer (repositories, etc.)."""

from nft_sales_tracker.persistence.repositories import (
    IDedupRepository,
    InMemoryDedupRepository,
)

__all__ = ["IDedupRepository", "InMemoryDedupRepository"]
