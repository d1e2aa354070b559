# -*- coding: utf-8 -*-
"""Unit tests for SaleConsumer."""

from __future__ import annotations

import asyncio
from typing import Any

from nft_sales_tracker.consumers import SaleConsumer
from nft_sales_tracker.events.sales import SaleDetectedEvent
from nft_sales_tracker.models.sale import Currency, SaleRecord
from nft_sales_tracker.queue.channel import SaleMessage, build_sale_channel


class _FakeEventBus:
    """Minimal event bus fake: records dispatched events."""

    def __init__(self, *, fail: bool = False) -> None:
        self.dispatched: list[Any] = []
        self._fail = fail

    async def _done(self) -> None:
        return None

    def dispatch(self, event: Any) -> Any:
        if self._fail:
            raise RuntimeError("bus down")
        self.dispatched.append(event)
        return self._done()


def _record(token_id: str = "1") -> SaleRecord:
    return SaleRecord(
        token_id=token_id,
        display_token_id=token_id,
        price_per_item="1",
        total_price="1",
        transfer_count=1,
        is_bulk_sale=False,
        is_wape_sale=False,
        currency=Currency.APE,
        buyer="0xB",
        seller="0xS",
        transaction_hash="0x" + "ab" * 32,
        item_url="https://item",
        tx_url="https://tx",
        marketplace="Magic Eden",
    )


async def test_consumer_publishes_each_message_then_stops_on_shutdown() -> None:
    channel = build_sale_channel(10)
    bus = _FakeEventBus()
    consumer = SaleConsumer(channel, bus)
    first = SaleMessage.create(payload=_record("1"))
    await channel.put(first)
    await channel.put(SaleMessage.create(payload=_record("2")))

    await consumer.start()
    channel.shutdown()
    await asyncio.wait_for(channel.join(), timeout=1)
    await consumer.stop()

    assert [e.sale.token_id for e in bus.dispatched] == ["1", "2"]
    assert all(isinstance(e, SaleDetectedEvent) for e in bus.dispatched)
    assert bus.dispatched[0].message_id == str(first.id)
    assert consumer.published_count == 2


async def test_publish_failure_is_logged_and_not_counted() -> None:
    consumer = SaleConsumer(build_sale_channel(1), _FakeEventBus(fail=True))
    await consumer.publish(SaleMessage.create(payload=_record()))
    assert consumer.published_count == 0


async def test_start_and_stop_are_idempotent() -> None:
    consumer = SaleConsumer(build_sale_channel(1), _FakeEventBus())
    async with consumer:
        await consumer.start()
    await consumer.stop()
