# -*- coding: utf-8 -*-
"""In-memory sale key repository (process lifetime, lost on restart)."""

from __future__ import annotations

from datetime import datetime

from nft_sales_tracker.models.dedup_entry import DedupEntry
from nft_sales_tracker.persistence.repositories.interfaces.dedup_repository import (
    IDedupRepository,
)


def _key(key: str) -> str:
    """Normalize key for storage."""
    return key.strip().lower()


class InMemoryDedupRepository(IDedupRepository):
    """In-memory implementation of IDedupRepository.

    Methods never await, so each one runs to completion on the event loop
    before any other handler resumes.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._store: dict[str, datetime] = {}

    async def add_if_absent(self, entry: DedupEntry) -> bool:
        k = _key(entry.key)
        if k in self._store:
            return False
        self._store[k] = entry.reserved_at
        return True

    async def remove(self, key: str) -> bool:
        return self._store.pop(_key(key), None) is not None

    async def contains(self, key: str) -> bool:
        return _key(key) in self._store

    async def count(self) -> int:
        return len(self._store)
