# -*- coding: utf-8 -*-
"""Unit tests for the sale channel and its message envelope."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from nft_sales_tracker.exceptions import QueueShutdown
from nft_sales_tracker.queue import QueueMessage, build_sale_channel


def test_message_carries_producer_context() -> None:
    message = QueueMessage.create(payload="record", metadata={"dedup_key": "1-0xab"})

    assert message.meta("dedup_key") == "1-0xab"
    assert message.meta("block_number", 0) == 0
    assert message.age_seconds(message.created_at + timedelta(seconds=2)) == 2.0


def test_message_without_metadata_has_empty_context() -> None:
    assert QueueMessage.create(payload="record").metadata == {}


async def test_channel_is_fifo_and_tracks_task_done() -> None:
    channel = build_sale_channel()
    first, second = QueueMessage.create("a"), QueueMessage.create("b")
    await channel.put(first)
    await channel.put(second)

    assert channel.qsize() == 2
    assert await channel.get() is first
    channel.task_done()
    assert await channel.get() is second
    channel.task_done()
    await channel.join()
    assert channel.qsize() == 0


async def test_bounded_channel_makes_producer_wait() -> None:
    channel = build_sale_channel(maxsize=1)
    assert channel.maxsize == 1
    await channel.put(QueueMessage.create("a"))

    with pytest.raises(TimeoutError):
        await asyncio.wait_for(channel.put(QueueMessage.create("b")), timeout=0.05)
    assert channel.qsize() == 1


async def test_shutdown_drains_then_raises() -> None:
    channel = build_sale_channel()
    await channel.put(QueueMessage.create("a"))
    channel.shutdown()

    with pytest.raises(QueueShutdown):
        await channel.put(QueueMessage.create("b"))
    assert (await channel.get()).payload == "a"
    with pytest.raises(QueueShutdown):
        await channel.get()
