# -*- coding: utf-8 -*-
"""Unit tests for DedupGuard."""

from __future__ import annotations

import asyncio

from nft_sales_tracker.persistence.repositories.in_memory import InMemoryDedupRepository
from nft_sales_tracker.services.dedup import DedupGuard


def _guard() -> DedupGuard:
    return DedupGuard(InMemoryDedupRepository())


async def test_reserve_succeeds_once() -> None:
    guard = _guard()
    assert await guard.reserve("0xabc") is True
    assert await guard.reserve("0xabc") is False
    assert await guard.is_reserved("0xabc") is True


async def test_release_allows_reserve_again() -> None:
    guard = _guard()
    await guard.reserve("5-0xabc")
    await guard.release("5-0xabc")
    assert await guard.is_reserved("5-0xabc") is False
    assert await guard.reserve("5-0xabc") is True


async def test_release_of_unknown_key_is_noop() -> None:
    guard = _guard()
    await guard.release("never-reserved")
    assert await guard.is_reserved("never-reserved") is False


async def test_concurrent_reservations_have_one_winner() -> None:
    guard = _guard()
    results = await asyncio.gather(*(guard.reserve("0xbulk") for _ in range(10)))
    assert results.count(True) == 1


async def test_reserved_count_tracks_reserve_and_release() -> None:
    guard = _guard()
    await guard.reserve("0xa")
    await guard.reserve("1-0xb")
    await guard.reserve("0xa")
    assert await guard.reserved_count() == 2
    await guard.release("0xa")
    assert await guard.reserved_count() == 1
