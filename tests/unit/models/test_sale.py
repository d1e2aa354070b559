# -*- coding: utf-8 -*-
"""Unit tests for sale models."""

from __future__ import annotations

from decimal import Decimal

from nft_sales_tracker.models.sale import Currency, SaleCandidate, SaleRecord, format_units
from nft_sales_tracker.models.token_metadata import Trait

ETHER = 10**18


def _candidate(*, token_ids: tuple[int, ...], currency: Currency, price: int) -> SaleCandidate:
    return SaleCandidate(
        token_ids=token_ids,
        currency=currency,
        raw_price_wei=price,
        seller_address="0xseller",
        buyer_address="0xbuyer",
        transaction_hash="0x" + "ab" * 32,
    )


def test_format_units_whole_and_fractional() -> None:
    assert format_units(ETHER) == "1"
    assert format_units(3 * ETHER // 2) == "1.5"
    assert format_units(0) == "0"
    assert format_units(1) == "0.000000000000000001"


def test_format_units_accepts_decimal() -> None:
    assert format_units(Decimal(100 * ETHER) / Decimal(4)) == "25"


def test_native_bulk_sale_splits_total_across_items() -> None:
    candidate = _candidate(token_ids=(1, 2, 3), currency=Currency.APE, price=300 * ETHER)
    assert candidate.is_bulk_sale is True
    assert candidate.is_wape_sale is False
    assert candidate.total_price_wei == 300 * ETHER
    assert candidate.price_per_item_wei == Decimal(100 * ETHER)


def test_wape_sale_price_is_per_item() -> None:
    candidate = _candidate(token_ids=(1, 2), currency=Currency.WAPE, price=50 * ETHER)
    assert candidate.is_wape_sale is True
    assert candidate.total_price_wei == 100 * ETHER
    assert candidate.price_per_item_wei == Decimal(50 * ETHER)


def test_single_sale_primary_token() -> None:
    candidate = _candidate(token_ids=(7,), currency=Currency.APE, price=ETHER)
    assert candidate.is_bulk_sale is False
    assert candidate.transfer_count == 1
    assert candidate.primary_token_id == 7


def test_sale_record_to_dict_flattens_nested_values() -> None:
    record = SaleRecord(
        token_id="7",
        display_token_id="8",
        price_per_item="1",
        total_price="1",
        transfer_count=1,
        is_bulk_sale=False,
        is_wape_sale=False,
        currency=Currency.APE,
        buyer="0xB",
        seller="0xS",
        transaction_hash="0xtx",
        item_url="https://item",
        tx_url="https://tx",
        marketplace="Magic Eden",
        token_ids=("7",),
        image_urls=("https://img",),
        traits=(Trait(trait_type="Fur", value="Gold"),),
    )
    data = record.to_dict()
    assert data["currency"] == "APE"
    assert data["token_ids"] == ["7"]
    assert data["image_urls"] == ["https://img"]
    assert data["traits"] == [{"trait_type": "Fur", "value": "Gold"}]
