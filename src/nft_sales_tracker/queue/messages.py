"""Envelope for items on the sale channel."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class QueueMessage[T]:
    """One queued item plus its id, enqueue time and producer-supplied context.

    The listener stores the dedup key and block number in ``metadata`` so
    consumers can log where a record came from without re-deriving it.
    """

    id: uuid.UUID
    payload: T
    created_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, payload: T, metadata: dict[str, Any] | None = None) -> QueueMessage[T]:
        return cls(
            id=uuid.uuid4(),
            payload=payload,
            created_at=datetime.now(UTC),
            metadata=dict(metadata or {}),
        )

    def meta(self, key: str, default: Any = None) -> Any:
        """Producer context value for key, or default."""
        return self.metadata.get(key, default)

    def age_seconds(self, now: datetime | None = None) -> float:
        """Seconds the message has spent between enqueue and now."""
        return ((now or datetime.now(UTC)) - self.created_at).total_seconds()
