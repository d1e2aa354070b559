# -*- coding: utf-8 -*-
"""Unit tests for SaleClassifier."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from types import SimpleNamespace
from typing import Any
from unittest.mock import Mock

import pytest

from nft_sales_tracker.models.chain import (
    TransactionContext,
    TransactionInfo,
    TransactionReceipt,
    TransferEvent,
)
from nft_sales_tracker.models.sale import Currency, SaleCandidate
from nft_sales_tracker.services.classification import SaleClassifier

ETHER = 10**18
UNLISTED = "0x1111111111111111111111111111111111111111"


class _Chain:
    """Parsed-model builders on top of the raw conftest builders."""

    def __init__(self, erc721_log: Any, erc20_log: Any, rpc_transaction: Any, rpc_receipt: Any) -> None:
        self.erc721_log = erc721_log
        self.erc20_log = erc20_log
        self._rpc_transaction = rpc_transaction
        self._rpc_receipt = rpc_receipt

    def tx(self, **kw: Any) -> TransactionInfo:
        return TransactionInfo.from_rpc(self._rpc_transaction(**kw))

    def receipt(self, logs: list[dict[str, Any]]) -> TransactionReceipt:
        return TransactionReceipt.from_rpc(self._rpc_receipt(logs))

    def event(self, token_id: int = 1) -> TransferEvent:
        return TransferEvent.from_log(self.erc721_log(token_id))


def _classify(
    classifier: SaleClassifier,
    event: TransferEvent,
    tx: TransactionInfo,
    receipt: TransactionReceipt,
) -> SaleCandidate | None:
    return classifier.classify(event, TransactionContext(transaction=tx, receipt=receipt))


@pytest.fixture
def chain(
    erc721_log: Callable[..., dict[str, Any]],
    erc20_log: Callable[..., dict[str, Any]],
    rpc_transaction: Callable[..., dict[str, Any]],
    rpc_receipt: Callable[..., dict[str, Any]],
) -> _Chain:
    return _Chain(erc721_log, erc20_log, rpc_transaction, rpc_receipt)


def test_transfer_to_unlisted_contract_is_not_a_candidate(settings: Any, chain: _Chain) -> None:
    classifier = SaleClassifier(settings)
    assert classifier.is_sale_candidate(chain.tx(to=UNLISTED, value=5 * ETHER)) is False


def test_zero_value_to_regular_marketplace_is_not_a_candidate(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    assert classifier.is_sale_candidate(chain.tx(to=addrs.marketplace, value=0)) is False


def test_marketplace_match_is_case_insensitive(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    assert classifier.is_sale_candidate(chain.tx(to=addrs.other_marketplace.lower(), value=1)) is True


def test_zero_value_bid_acceptance_is_a_candidate(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    assert classifier.is_sale_candidate(chain.tx(to=addrs.bid_acceptance, value=0)) is True


def test_contract_creation_is_not_a_candidate(settings: Any, chain: _Chain) -> None:
    classifier = SaleClassifier(settings)
    assert classifier.is_sale_candidate(chain.tx(to=None, value=ETHER)) is False


def test_non_candidate_classifies_to_none(settings: Any, chain: _Chain) -> None:
    classifier = SaleClassifier(settings)
    tx = chain.tx(to=UNLISTED, value=ETHER)
    assert _classify(classifier, chain.event(), tx, chain.receipt([chain.erc721_log(1)])) is None


def test_bid_acceptance_uses_largest_erc20_leg(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    tx = chain.tx(to=addrs.bid_acceptance, value=0)
    receipt = chain.receipt(
        [chain.erc20_log(10 * ETHER), chain.erc721_log(1), chain.erc20_log(100 * ETHER)]
    )

    candidate = _classify(classifier, chain.event(), tx, receipt)

    assert candidate is not None
    assert candidate.currency is Currency.WAPE
    assert candidate.raw_price_wei == 100 * ETHER
    assert candidate.total_price_wei == 100 * ETHER
    assert candidate.is_wape_sale is True


def test_wape_single_sale_total_equals_price(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    tx = chain.tx(to=addrs.bid_acceptance, value=0)
    candidate = _classify(
        classifier, chain.event(), tx, chain.receipt([chain.erc721_log(1), chain.erc20_log(50 * ETHER)])
    )
    assert candidate is not None
    assert candidate.is_bulk_sale is False
    assert candidate.total_price_wei == 50 * ETHER
    assert candidate.price_per_item_wei == Decimal(50 * ETHER)


def test_native_bulk_sale_splits_value(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    tx = chain.tx(to=addrs.marketplace, value=300 * ETHER)
    receipt = chain.receipt([chain.erc721_log(11), chain.erc721_log(12), chain.erc721_log(13)])

    candidate = _classify(classifier, chain.event(12), tx, receipt)

    assert candidate is not None
    assert candidate.currency is Currency.APE
    assert candidate.token_ids == (11, 12, 13)
    assert candidate.transfer_count == 3
    assert candidate.is_bulk_sale is True
    assert candidate.total_price_wei == 300 * ETHER
    assert candidate.price_per_item_wei == Decimal(100 * ETHER)
    assert candidate.primary_token_id == 11


def test_native_value_wins_over_erc20_legs(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    tx = chain.tx(to=addrs.marketplace, value=2 * ETHER)
    candidate = _classify(
        classifier, chain.event(), tx, chain.receipt([chain.erc721_log(1), chain.erc20_log(99 * ETHER)])
    )
    assert candidate is not None
    assert candidate.currency is Currency.APE
    assert candidate.raw_price_wei == 2 * ETHER


def test_bid_acceptance_without_erc20_leg_is_dropped(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    tx = chain.tx(to=addrs.bid_acceptance, value=0)
    assert _classify(classifier, chain.event(), tx, chain.receipt([chain.erc721_log(1)])) is None


def test_extract_token_ids_ignores_other_contracts_and_repeats(settings: Any, chain: _Chain) -> None:
    classifier = SaleClassifier(settings)
    other = "0x3333333333333333333333333333333333333333"
    receipt = chain.receipt(
        [
            chain.erc721_log(5),
            chain.erc721_log(9, contract=other),
            chain.erc721_log(6),
            chain.erc721_log(5),
        ]
    )
    assert classifier.extract_token_ids(receipt) == (5, 6)


def test_find_settlement_amount_ignores_empty_data_and_nft_logs(settings: Any, chain: _Chain) -> None:
    classifier = SaleClassifier(settings)
    empty = chain.erc20_log(0)
    empty["data"] = "0x"
    receipt = chain.receipt([empty, chain.erc721_log(1), chain.erc20_log(7)])
    assert classifier.find_settlement_amount(receipt.logs) == 7


def test_missing_contract_logs_fall_back_to_event_token(
    settings: Any, chain: _Chain, addrs: SimpleNamespace
) -> None:
    classifier = SaleClassifier(settings)
    tx = chain.tx(to=addrs.marketplace, value=ETHER)
    candidate = _classify(classifier, chain.event(42), tx, chain.receipt([]))
    assert candidate is not None
    assert candidate.token_ids == (42,)


def test_debug_mode_traces_at_info(settings_factory: Callable[..., Any], chain: _Chain) -> None:
    logger = Mock()
    classifier = SaleClassifier(
        settings_factory(app={"debug_mode": True}),
        get_logger=lambda _name: logger,
    )
    classifier.is_sale_candidate(chain.tx(value=1))
    logger.info.assert_called_once()
    assert logger.info.call_args.args[0] == "sale_candidate_check"
    logger.debug.assert_not_called()
