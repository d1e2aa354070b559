"""DedupEntry: a reserved sale identity.

Identity is the sale key from utils.dedupe.sale_key() (tx hash for bulk sales,
"{tokenId}-{txHash}" for single sales).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class DedupEntry:
    """Record that a sale key has been reserved for emission."""

    key: str
    reserved_at: datetime
    """When the key was reserved (for retention/audit in durable stores)."""

    @classmethod
    def create(cls, key: str, *, reserved_at: datetime | None = None) -> DedupEntry:
        """Create a new entry for key."""
        key = key.strip()
        if not key:
            raise ValueError("key must be non-empty")
        return cls(key=key, reserved_at=reserved_at or datetime.now(UTC))
