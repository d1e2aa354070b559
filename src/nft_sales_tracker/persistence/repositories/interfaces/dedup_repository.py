"""Abstract interface for sale key storage (in-memory, DB, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from nft_sales_tracker.models.dedup_entry import DedupEntry


class IDedupRepository(ABC):
    """Interface for the key -> reserved_at store behind DedupGuard."""

    @abstractmethod
    async def add_if_absent(self, entry: DedupEntry) -> bool:
        """Insert entry unless its key is present. Return True if inserted.

        Test and insert must be one atomic step for every concurrently running
        handler (a durable store would use a unique constraint).
        """
        ...

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """Remove key. Return True if it was present."""
        ...

    @abstractmethod
    async def contains(self, key: str) -> bool:
        """Return True if key is stored."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored keys."""
        ...
