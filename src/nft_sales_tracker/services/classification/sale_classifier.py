"""SaleClassifier: decides whether a Transfer is a marketplace sale and reconstructs its economics.

There is no "sale" event on-chain. A transfer counts as a sale when the
transaction was sent to an allow-listed marketplace contract and either
carries native value or targets the bid-acceptance contract (whose sales
settle in the wrapped ERC-20 token with zero native value).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

import structlog

from nft_sales_tracker.models.chain import (
    ReceiptLog,
    TransactionContext,
    TransactionInfo,
    TransactionReceipt,
    TransferEvent,
)
from nft_sales_tracker.models.sale import Currency, SaleCandidate
from nft_sales_tracker.utils.validation import (
    hex_to_int,
    mask_address,
    normalize_address,
    same_address,
)

if TYPE_CHECKING:
    from nft_sales_tracker.config import Settings


def _erc20_transfer_amount(log: ReceiptLog) -> int | None:
    """Return the amount of a standard ERC-20 Transfer log, or None for any other shape."""
    if not log.is_transfer or len(log.topics) != 3:
        return None
    if not log.data or log.data == "0x":
        return None
    try:
        return hex_to_int(log.data)
    except ValueError:
        return None


class SaleClassifier:
    """Classifies sale candidates: currency, resolved price and bulk/single shape."""

    def __init__(
        self,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the classifier.

        Args:
            settings: Application settings (uses settings.chain and settings.app.debug_mode).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        chain = settings.chain
        self._contract = normalize_address(chain.contract_address)
        self._marketplaces = frozenset(
            normalize_address(a) for a in chain.marketplace_addresses if a
        )
        self._bid_acceptance = normalize_address(chain.bid_acceptance_address)
        self._debug_mode = settings.app.debug_mode
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _trace(self, event: str, **kw: Any) -> None:
        if self._debug_mode:
            self._logger.info(event, **kw)
        else:
            self._logger.debug(event, **kw)

    def is_marketplace(self, address: str | None) -> bool:
        return normalize_address(address) in self._marketplaces

    def is_bid_acceptance(self, address: str | None) -> bool:
        return same_address(address, self._bid_acceptance)

    def is_sale_candidate(self, tx: TransactionInfo) -> bool:
        """True if tx.to is an allow-listed marketplace and (value > 0 or tx.to is bid acceptance)."""
        is_marketplace = self.is_marketplace(tx.to)
        has_value = tx.value > 0
        is_bid_accept = self.is_bid_acceptance(tx.to)
        result = is_marketplace and (has_value or is_bid_accept)
        self._trace(
            "sale_candidate_check",
            tx_hash_masked=mask_address(tx.hash),
            is_marketplace=is_marketplace,
            has_value=has_value,
            is_bid_acceptance=is_bid_accept,
            is_candidate=result,
        )
        return result

    def extract_token_ids(self, receipt: TransactionReceipt) -> tuple[int, ...]:
        """Distinct token ids moved by the watched contract in this receipt, in log order."""
        seen: dict[int, None] = {}
        for log in receipt.logs:
            if log.address != self._contract or not log.is_transfer:
                continue
            if len(log.topics) != 4:
                continue
            try:
                token_id = hex_to_int(log.topics[3])
            except ValueError:
                continue
            seen.setdefault(token_id, None)
        return tuple(seen)

    def find_settlement_amount(self, logs: Iterable[ReceiptLog]) -> int:
        """Largest ERC-20 Transfer amount among logs (first occurrence wins ties); 0 if none.

        The settlement leg is the largest transfer; smaller legs in the same
        transaction route marketplace and royalty fees.
        """
        best = 0
        values: list[int] = []
        for log in logs:
            amount = _erc20_transfer_amount(log)
            if amount is None:
                continue
            values.append(amount)
            if amount > best:
                best = amount
        self._trace(
            "settlement_amount_scan",
            erc20_transfer_count=len(values),
            erc20_transfer_values=[str(v) for v in values],
            settlement_amount_wei=str(best),
        )
        return best

    def resolve_price(
        self,
        tx: TransactionInfo,
        receipt: TransactionReceipt,
    ) -> tuple[int, Currency]:
        """Return (raw price in wei, currency).

        Native value by default; zero-value calls to the bid-acceptance
        contract are priced by their ERC-20 settlement leg.
        """
        if tx.value == 0 and self.is_bid_acceptance(tx.to):
            return self.find_settlement_amount(receipt.logs), Currency.WAPE
        return tx.value, Currency.APE

    def classify(
        self,
        event: TransferEvent,
        context: TransactionContext,
    ) -> SaleCandidate | None:
        """Build a SaleCandidate, or None when this is not a priced sale.

        Args:
            event: Transfer that triggered the lookup (seller/buyer come from it).
            context: Originating transaction and receipt; token ids are
                extracted from the receipt when context.token_ids is None.
        """
        tx, receipt = context.transaction, context.receipt
        if not self.is_sale_candidate(tx):
            return None

        ids = context.token_ids
        if ids is None:
            ids = self.extract_token_ids(receipt)
        if not ids:
            # The watched contract's own log must be in the receipt; fall back to the event.
            ids = (event.token_id,)

        price, currency = self.resolve_price(tx, receipt)
        if price <= 0:
            self._trace(
                "sale_skipped_zero_price",
                tx_hash_masked=mask_address(event.transaction_hash),
                currency=currency.value,
            )
            return None

        candidate = SaleCandidate(
            token_ids=ids,
            currency=currency,
            raw_price_wei=price,
            seller_address=event.from_address,
            buyer_address=event.to_address,
            transaction_hash=event.transaction_hash,
        )
        self._trace(
            "sale_classified",
            tx_hash_masked=mask_address(candidate.transaction_hash),
            currency=currency.value,
            raw_price_wei=str(price),
            transfer_count=candidate.transfer_count,
            is_bulk_sale=candidate.is_bulk_sale,
            total_price_wei=str(candidate.total_price_wei),
            price_per_item_wei=str(candidate.price_per_item_wei),
        )
        return candidate
