"""DedupGuard: at-most-once emission per sale key."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from nft_sales_tracker.models.dedup_entry import DedupEntry

if TYPE_CHECKING:
    from nft_sales_tracker.persistence.repositories.interfaces.dedup_repository import (
        IDedupRepository,
    )


class DedupGuard:
    """Reserves sale keys in an injected store.

    reserve() is a single test-and-insert on the store. release() is only for
    pipelines that failed before emission; a key whose sale was emitted is
    never released. The default store is in-memory, so history is lost on
    restart and a sale may be re-alerted after a redeploy.
    """

    def __init__(
        self,
        repository: IDedupRepository,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._repo = repository
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def reserve(self, key: str) -> bool:
        """Reserve key. Return False if it was already reserved (caller must abort)."""
        inserted = await self._repo.add_if_absent(DedupEntry.create(key))
        if not inserted:
            self._logger.debug("dedup_key_already_reserved", dedup_key=key)
        return inserted

    async def release(self, key: str) -> None:
        """Release key after a processing failure so a later notification can retry."""
        removed = await self._repo.remove(key)
        self._logger.debug("dedup_key_released", dedup_key=key, dedup_key_was_reserved=removed)

    async def is_reserved(self, key: str) -> bool:
        return await self._repo.contains(key)

    async def reserved_count(self) -> int:
        """Number of keys currently held (emitted sales plus in-flight reservations)."""
        return await self._repo.count()
