"""Chain data as seen by the listener: Transfer events, transactions and receipts.

All values are parsed from raw JSON-RPC objects (hex quantities, lowercase
hex addresses). Amounts stay integers in the smallest unit (wei).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from nft_sales_tracker.utils.validation import (
    hex_to_int,
    normalize_address,
    topic_to_address,
)

# keccak256("Transfer(address,address,uint256)"); shared by ERC-20 and ERC-721.
TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"


@dataclass(frozen=True, slots=True)
class ReceiptLog:
    """One log entry of a transaction receipt."""

    address: str
    """Emitting contract (lowercase 0x...)."""
    topics: tuple[str, ...]
    data: str
    log_index: int | None = None

    @property
    def is_transfer(self) -> bool:
        return bool(self.topics) and self.topics[0].lower() == TRANSFER_TOPIC

    @classmethod
    def from_rpc(cls, raw: dict[str, Any]) -> ReceiptLog:
        """Build from a JSON-RPC log object.

        Raises:
            ValueError: If address or topics are missing or not strings.
        """
        address = raw.get("address")
        topics = raw.get("topics")
        if not isinstance(address, str) or not isinstance(topics, list):
            raise ValueError("log is missing address or topics")
        if not all(isinstance(t, str) for t in topics):
            raise ValueError("log topics must be hex strings")
        data = raw.get("data")
        log_index = raw.get("logIndex")
        return cls(
            address=normalize_address(address),
            topics=tuple(t.lower() for t in topics),
            data=data if isinstance(data, str) else "0x",
            log_index=hex_to_int(log_index) if log_index is not None else None,
        )


@dataclass(frozen=True, slots=True)
class TransferEvent:
    """Transfer(from, to, tokenId) emitted by the watched contract."""

    from_address: str
    to_address: str
    token_id: int
    transaction_hash: str
    block_number: int | None = None
    log_index: int | None = None

    @classmethod
    def from_log(cls, raw: dict[str, Any]) -> TransferEvent:
        """Build from an eth_getLogs entry with the ERC-721 (4-topic) Transfer shape.

        Raises:
            ValueError: If the log is not a well-formed ERC-721 Transfer.
        """
        log = ReceiptLog.from_rpc(raw)
        if not log.is_transfer or len(log.topics) != 4:
            raise ValueError("log is not an ERC-721 Transfer")
        tx_hash = raw.get("transactionHash")
        if not isinstance(tx_hash, str) or not tx_hash:
            raise ValueError("log has no transactionHash")
        block = raw.get("blockNumber")
        return cls(
            from_address=topic_to_address(log.topics[1]),
            to_address=topic_to_address(log.topics[2]),
            token_id=hex_to_int(log.topics[3]),
            transaction_hash=tx_hash.lower(),
            block_number=hex_to_int(block) if block is not None else None,
            log_index=log.log_index,
        )


@dataclass(frozen=True, slots=True)
class TransactionInfo:
    """The originating transaction: direct recipient and native value."""

    hash: str
    to: str | None
    """Direct recipient; None for contract creation."""
    value: int
    """Native value in wei."""
    from_address: str | None = None

    @classmethod
    def from_rpc(cls, raw: dict[str, Any]) -> TransactionInfo:
        to = raw.get("to")
        sender = raw.get("from")
        return cls(
            hash=str(raw.get("hash") or "").lower(),
            to=normalize_address(to) if isinstance(to, str) and to else None,
            value=hex_to_int(raw.get("value") or "0x0"),
            from_address=normalize_address(sender) if isinstance(sender, str) else None,
        )


@dataclass(frozen=True, slots=True)
class TransactionReceipt:
    """Receipt logs of a mined transaction.

    Logs that cannot be parsed are counted in skipped_logs and left out.
    """

    transaction_hash: str
    logs: tuple[ReceiptLog, ...]
    status: int | None = None
    block_number: int | None = None
    skipped_logs: int = 0

    @classmethod
    def from_rpc(cls, raw: dict[str, Any]) -> TransactionReceipt:
        logs: list[ReceiptLog] = []
        skipped = 0
        raw_logs = raw.get("logs")
        for entry in raw_logs if isinstance(raw_logs, list) else []:
            try:
                logs.append(ReceiptLog.from_rpc(entry))
            except (ValueError, TypeError, AttributeError):
                skipped += 1
        status = raw.get("status")
        block = raw.get("blockNumber")
        return cls(
            transaction_hash=str(raw.get("transactionHash") or "").lower(),
            logs=tuple(logs),
            status=hex_to_int(status) if status is not None else None,
            block_number=hex_to_int(block) if block is not None else None,
            skipped_logs=skipped,
        )


@dataclass(frozen=True, slots=True)
class TransactionContext:
    """Transaction plus its receipt; lives only while one sale candidate is processed."""

    transaction: TransactionInfo
    receipt: TransactionReceipt
    token_ids: tuple[int, ...] | None = None
    """Distinct token ids moved by the watched contract, in log order (None = not extracted yet)."""
