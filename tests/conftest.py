# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest
from bubus import EventBus  # type: ignore[import-untyped]

from nft_sales_tracker.models.chain import TRANSFER_TOPIC

CONTRACT = "0x7a3f2b1c9d8e4f5a6b7c8d9e0f1a2b3c4d5e6f70"
MARKETPLACE = "0x0000000000000068F116a894984e2DB1123eB395"
OTHER_MARKETPLACE = "0x1d3a594EAf472ca2ceC2A8aE44478c06d6A37E22"
BID_ACCEPTANCE = "0x224ecB4Eae96d31372D1090c3B0233C8310dBbaB"
WAPE_TOKEN = "0x48b62137edfa95a428d35c09e44256a739f6b557"
SELLER = "0x2d27b6e21b3d4d7c9a43fdf58f12345678907706"
BUYER = "0x9f8e7d6c5b4a39281706f5e4d3c2b1a098765432"
TX_HASH = "0x" + "ab" * 32

ETHER = 10**18


def topic_address(address: str) -> str:
    """Left-pad a 20-byte address into a 32-byte topic."""
    return "0x" + "0" * 24 + address.lower().removeprefix("0x")


def topic_uint(value: int) -> str:
    return "0x" + format(value, "064x")


@pytest.fixture
def event_bus() -> EventBus:
    """Isolated bubus event bus."""
    return EventBus(name="TestBus", max_history_size=10, wal_path=None)


@pytest.fixture
def settings_factory() -> Callable[..., Any]:
    """Build a minimal settings object with the sections the pipeline reads.

    Keyword overrides are per section, e.g. settings_factory(chain={"poll_seconds": 0.01}).
    """

    def _build(**overrides: dict[str, Any]) -> Any:
        sections: dict[str, dict[str, Any]] = {
            "app": {"app_name": "nft-sales-tracker", "debug_mode": False},
            "api": {"timeout_seconds": 5.0, "max_retries": 1},
            "chain": {
                "rpc_url": "https://rpc.example.test",
                "chain_id": 33139,
                "contract_address": CONTRACT,
                "marketplace_addresses": [MARKETPLACE, OTHER_MARKETPLACE, BID_ACCEPTANCE],
                "bid_acceptance_address": BID_ACCEPTANCE,
                "poll_seconds": 0.01,
                "start_block": None,
                "max_block_range": 500,
                "confirmations": 0,
            },
            "receipts": {"max_retries": 3, "backoff_seconds": 1.0},
            "metadata": {
                "gateways": [
                    "https://nftstorage.link/ipfs/",
                    "https://cloudflare-ipfs.com/ipfs/",
                    "https://ipfs.io/ipfs/",
                    "https://gateway.pinata.cloud/ipfs/",
                    "https://dweb.link/ipfs/",
                ],
                "probe_timeout_seconds": 5.0,
                "max_bulk_images": 4,
            },
            "links": {
                "marketplace_name": "Magic Eden",
                "item_url_template": "https://magiceden.io/item-details/apechain/{contract}/{tokenId}",
                "tx_url_template": "https://apescan.io/tx/{txHash}",
                "token_id_offset": 0,
            },
            "channel": {"queue_size": 100},
            "console": {"enabled": True},
        }
        for section, values in overrides.items():
            sections.setdefault(section, {}).update(values)
        return SimpleNamespace(**{k: SimpleNamespace(**v) for k, v in sections.items()})

    return _build


@pytest.fixture
def settings(settings_factory: Callable[..., Any]) -> Any:
    return settings_factory()


@pytest.fixture
def erc721_log() -> Callable[..., dict[str, Any]]:
    """Raw JSON-RPC log of an ERC-721 Transfer (4 topics)."""

    def _build(
        token_id: int,
        *,
        from_address: str = SELLER,
        to_address: str = BUYER,
        contract: str = CONTRACT,
        tx_hash: str = TX_HASH,
        block_number: int = 100,
    ) -> dict[str, Any]:
        return {
            "address": contract,
            "topics": [
                TRANSFER_TOPIC,
                topic_address(from_address),
                topic_address(to_address),
                topic_uint(token_id),
            ],
            "data": "0x",
            "transactionHash": tx_hash,
            "blockNumber": hex(block_number),
            "logIndex": "0x0",
        }

    return _build


@pytest.fixture
def erc20_log() -> Callable[..., dict[str, Any]]:
    """Raw JSON-RPC log of an ERC-20 Transfer (3 topics, amount in data)."""

    def _build(
        amount: int,
        *,
        from_address: str = BUYER,
        to_address: str = SELLER,
        token: str = WAPE_TOKEN,
    ) -> dict[str, Any]:
        return {
            "address": token,
            "topics": [
                TRANSFER_TOPIC,
                topic_address(from_address),
                topic_address(to_address),
            ],
            "data": topic_uint(amount),
            "logIndex": "0x1",
        }

    return _build


@pytest.fixture
def rpc_transaction() -> Callable[..., dict[str, Any]]:
    """Raw eth_getTransactionByHash result."""

    def _build(*, to: str | None = MARKETPLACE, value: int = 0, tx_hash: str = TX_HASH) -> dict[str, Any]:
        return {"hash": tx_hash, "to": to, "from": BUYER, "value": hex(value)}

    return _build


@pytest.fixture
def rpc_receipt() -> Callable[..., dict[str, Any]]:
    """Raw eth_getTransactionReceipt result."""

    def _build(logs: list[Any], *, tx_hash: str = TX_HASH) -> dict[str, Any]:
        return {"transactionHash": tx_hash, "status": "0x1", "blockNumber": "0x64", "logs": logs}

    return _build


@pytest.fixture
def addrs() -> SimpleNamespace:
    """Well-known addresses and hashes used across tests."""
    return SimpleNamespace(
        contract=CONTRACT,
        marketplace=MARKETPLACE,
        other_marketplace=OTHER_MARKETPLACE,
        bid_acceptance=BID_ACCEPTANCE,
        wape_token=WAPE_TOKEN,
        seller=SELLER,
        buyer=BUYER,
        tx_hash=TX_HASH,
        ether=ETHER,
    )
