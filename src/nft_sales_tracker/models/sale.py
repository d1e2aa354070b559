"""Sale models: the working candidate built by the classifier and the emitted record."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from nft_sales_tracker.models.token_metadata import Trait

WEI_DECIMALS = 18


class Currency(str, Enum):
    """Currency a sale was settled in."""

    APE = "APE"
    """Native chain currency (transaction value)."""
    WAPE = "WAPE"
    """Wrapped fungible token (ERC-20 settlement leg of a bid acceptance)."""


def format_units(amount: int | Decimal, decimals: int = WEI_DECIMALS) -> str:
    """Format a smallest-unit amount as a plain decimal string (e.g. 1500000000000000000 -> '1.5')."""
    value = Decimal(amount).scaleb(-decimals)
    if value == value.to_integral_value():
        return f"{value.quantize(Decimal(1)):f}"
    return f"{value.normalize():f}"


@dataclass(frozen=True, slots=True)
class SaleCandidate:
    """Sale economics reconstructed from one transaction.

    raw_price_wei is the resolved price: the native value (total for all items)
    or, for WAPE sales, the largest ERC-20 settlement leg (price of one item).
    """

    token_ids: tuple[int, ...]
    currency: Currency
    raw_price_wei: int
    seller_address: str
    buyer_address: str
    transaction_hash: str

    @property
    def transfer_count(self) -> int:
        return len(self.token_ids)

    @property
    def is_bulk_sale(self) -> bool:
        return self.transfer_count > 1

    @property
    def is_wape_sale(self) -> bool:
        return self.currency is Currency.WAPE

    @property
    def total_price_wei(self) -> int:
        """Total paid across all items (WAPE price is per item, native value is the total)."""
        if self.is_wape_sale:
            return self.raw_price_wei * self.transfer_count
        return self.raw_price_wei

    @property
    def price_per_item_wei(self) -> Decimal:
        """Per-item price in wei; native totals are split evenly across items."""
        if self.is_wape_sale:
            return Decimal(self.raw_price_wei)
        return Decimal(self.raw_price_wei) / Decimal(max(1, self.transfer_count))

    @property
    def primary_token_id(self) -> int:
        return self.token_ids[0]


@dataclass(frozen=True, slots=True)
class SaleRecord:
    """Canonical sale emitted once per unique sale key. Never mutated after emission."""

    token_id: str
    """First (primary) token id, as on-chain decimal string."""
    display_token_id: str
    """token_id plus the configured display offset."""
    price_per_item: str
    total_price: str
    transfer_count: int
    is_bulk_sale: bool
    is_wape_sale: bool
    currency: Currency
    buyer: str
    seller: str
    transaction_hash: str
    item_url: str
    tx_url: str
    marketplace: str
    token_ids: tuple[str, ...] = ()
    image_urls: tuple[str, ...] = ()
    """Resolved images in token order; tokens without one are skipped, so this is not index-aligned with token_ids."""
    traits: tuple[Trait, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Snake_case dict for downstream formatters."""
        data = asdict(self)
        data["currency"] = self.currency.value
        data["token_ids"] = list(self.token_ids)
        data["image_urls"] = list(self.image_urls)
        data["traits"] = [t.to_dict() for t in self.traits]
        return data
