"""In-memory repository implementations."""

from nft_sales_tracker.persistence.repositories.in_memory.dedup_repository import (
    InMemoryDedupRepository,
)

__all__ = ["InMemoryDedupRepository"]
