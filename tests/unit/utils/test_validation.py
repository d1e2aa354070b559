# -*- coding: utf-8 -*-
"""Unit tests for address, hash and hex helpers."""

from __future__ import annotations

import pytest

from nft_sales_tracker.utils.validation import (
    hex_to_int,
    is_hex_address,
    is_tx_hash,
    mask_address,
    normalize_address,
    same_address,
    topic_to_address,
)


def test_is_hex_address_accepts_mixed_case() -> None:
    assert is_hex_address("0x224ecB4Eae96d31372D1090c3B0233C8310dBbaB") is True


@pytest.mark.parametrize("value", ["", "0x1234", "224ecB4Eae96d31372D1090c3B0233C8310dBbaB00", None, 12])
def test_is_hex_address_rejects_invalid(value: object) -> None:
    assert is_hex_address(value) is False


def test_is_tx_hash() -> None:
    assert is_tx_hash("0x" + "f" * 64) is True
    assert is_tx_hash("0x" + "f" * 63) is False
    assert is_tx_hash("0x" + "z" * 64) is False


def test_normalize_address_lowercases_and_prefixes() -> None:
    assert normalize_address(" ABCDEF ") == "0xabcdef"
    assert normalize_address(None) == ""


def test_same_address_is_case_insensitive() -> None:
    assert same_address("0xAbC", "0xabc") is True
    assert same_address(None, None) is False


def test_hex_to_int() -> None:
    assert hex_to_int("0x1a") == 26
    assert hex_to_int("0x") == 0
    assert hex_to_int(5) == 5


def test_hex_to_int_rejects_bool_and_garbage() -> None:
    with pytest.raises(ValueError):
        hex_to_int(True)
    with pytest.raises(ValueError):
        hex_to_int("0xzz")


def test_topic_to_address_takes_low_20_bytes() -> None:
    topic = "0x" + "0" * 24 + "224ecb4eae96d31372d1090c3b0233c8310dbbab"
    assert topic_to_address(topic) == "0x224ecb4eae96d31372d1090c3b0233c8310dbbab"


def test_topic_to_address_rejects_short_topic() -> None:
    with pytest.raises(ValueError):
        topic_to_address("0x1234")


def test_mask_address() -> None:
    assert mask_address("0x224ecB4Eae96d31372D1090c3B0233C8310dBbaB") == "0x224e...BbaB"
    assert mask_address("0x12") == "***"
