"""ChainListener: follows the watched contract's Transfer logs and emits one SaleRecord per sale.

Per event: transaction -> candidacy check -> receipt -> classification ->
dedup reservation -> metadata -> SaleRecord on the sale channel. Every
event is handled in its own task, so several can be in flight at once;
the dedup reservation is what lets exactly one of them emit a bulk sale.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bound_contextvars
from web3 import Web3

from nft_sales_tracker.exceptions import (
    MissingRequiredConfigError,
    ReceiptFetchError,
    SubscriptionError,
)
from nft_sales_tracker.models.chain import TRANSFER_TOPIC, TransactionContext, TransferEvent
from nft_sales_tracker.models.sale import SaleCandidate, SaleRecord, format_units
from nft_sales_tracker.models.token_metadata import SaleMetadata
from nft_sales_tracker.queue.channel import SaleMessage
from nft_sales_tracker.utils.dedupe import sale_key
from nft_sales_tracker.utils.validation import is_hex_address, mask_address, normalize_address

if TYPE_CHECKING:
    from nft_sales_tracker.clients.rpc_client import RpcClient
    from nft_sales_tracker.config import Settings
    from nft_sales_tracker.queue.channel import SaleChannel
    from nft_sales_tracker.services.classification import SaleClassifier
    from nft_sales_tracker.services.dedup import DedupGuard
    from nft_sales_tracker.services.metadata import MetadataResolver
    from nft_sales_tracker.services.receipts import ReceiptFetcher


def _checksum(address: str) -> str:
    try:
        return Web3.to_checksum_address(address)
    except ValueError:
        return address


class ChainListener:
    """Subscribes to Transfer logs of one contract (eth_getLogs polling) and drives the sale pipeline."""

    def __init__(
        self,
        settings: Settings,
        rpc_client: RpcClient,
        receipt_fetcher: ReceiptFetcher,
        classifier: SaleClassifier,
        dedup_guard: DedupGuard,
        metadata_resolver: MetadataResolver,
        channel: SaleChannel,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the listener.

        Args:
            settings: Application settings (uses settings.chain and settings.links).
            rpc_client: JSON-RPC client for head block and log queries.
            receipt_fetcher: Transaction/receipt lookups with retry.
            classifier: Sale classifier.
            dedup_guard: At-most-once guard for sale keys.
            metadata_resolver: Image/trait lookups.
            channel: Sale channel the records are published on.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        chain = settings.chain
        self._settings = settings
        self._rpc = rpc_client
        self._fetcher = receipt_fetcher
        self._classifier = classifier
        self._dedup = dedup_guard
        self._metadata = metadata_resolver
        self._channel = channel
        self._contract = normalize_address(chain.contract_address)
        self._contract_display = chain.contract_address.strip()
        self._poll_seconds = chain.poll_seconds
        self._max_block_range = chain.max_block_range
        self._confirmations = chain.confirmations
        self._next_block: int | None = chain.start_block
        self._poll_task: asyncio.Task[None] | None = None
        self._handlers: set[asyncio.Task[SaleRecord | None]] = set()
        self._lock = asyncio.Lock()
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def next_block(self) -> int | None:
        """First block the next poll will scan."""
        return self._next_block

    @property
    def in_flight(self) -> int:
        """Number of transfer handlers currently running."""
        return len(self._handlers)

    # ------------------------------------------------------------------
    # Subscription lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Establish the subscription and start polling in a background task. Idempotent.

        Raises:
            MissingRequiredConfigError: If the contract address is not configured.
            SubscriptionError: If the node is unreachable or on another chain.
        """
        async with self._lock:
            if self._poll_task is not None:
                return
            await self._establish()
            self._poll_task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop polling and wait for in-flight handlers to finish. Idempotent."""
        async with self._lock:
            task = self._poll_task
            self._poll_task = None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._handlers:
            await asyncio.gather(*list(self._handlers), return_exceptions=True)
        self._logger.info("listener_stopped")

    async def _establish(self) -> None:
        if not is_hex_address(self._contract):
            raise MissingRequiredConfigError("CHAIN__CONTRACT_ADDRESS")
        expected_chain_id = self._settings.chain.chain_id
        try:
            chain_id = await self._rpc.get_chain_id()
            head = await self._rpc.get_block_number()
        except Exception as e:
            raise SubscriptionError(
                f"Cannot reach chain node at {self._settings.chain.rpc_url}: {e}"
            ) from e
        if chain_id != expected_chain_id:
            raise SubscriptionError(
                f"Node is on chain {chain_id}, expected {expected_chain_id}"
            )
        if self._next_block is None:
            self._next_block = head
        self._logger.info(
            "listener_subscribed",
            contract_masked=mask_address(self._contract),
            start_block=self._next_block,
            head_block=head,
            marketplace_count=len(self._settings.chain.marketplace_addresses),
        )

    async def run(self) -> None:
        """Poll loop. Poll failures are logged and retried on the next tick."""
        try:
            while True:
                try:
                    await self.poll_once()
                except Exception as e:
                    self._logger.warning(
                        "listener_poll_failed",
                        next_block=self._next_block,
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                await asyncio.sleep(self._poll_seconds)
        except asyncio.CancelledError:
            self._logger.debug("listener_poll_cancelled", next_block=self._next_block)
            raise

    async def poll_once(self) -> int:
        """Fetch Transfer logs from the cursor up to head - confirmations and dispatch one handler per event.

        Returns:
            Number of events dispatched.
        """
        head = await self._rpc.get_block_number() - self._confirmations
        if self._next_block is None:
            self._next_block = max(head, 0)
        dispatched = 0
        while self._next_block <= head:
            from_block = self._next_block
            to_block = min(head, from_block + self._max_block_range - 1)
            logs = await self._rpc.get_logs(
                address=self._contract,
                topics=[TRANSFER_TOPIC],
                from_block=from_block,
                to_block=to_block,
            )
            for raw in logs:
                try:
                    event = TransferEvent.from_log(raw)
                except (ValueError, TypeError) as e:
                    self._logger.debug(
                        "listener_log_skipped",
                        error_message=str(e),
                        tx_hash=raw.get("transactionHash"),
                    )
                    continue
                self.dispatch(event)
                dispatched += 1
            self._next_block = to_block + 1
        if dispatched:
            self._logger.debug(
                "listener_poll_dispatched",
                dispatched_count=dispatched,
                next_block=self._next_block,
            )
        return dispatched

    def dispatch(self, event: TransferEvent) -> asyncio.Task[SaleRecord | None]:
        """Handle event in its own task (tracked until done)."""
        task = asyncio.create_task(self.handle_transfer(event))
        self._handlers.add(task)
        task.add_done_callback(self._handlers.discard)
        return task

    # ------------------------------------------------------------------
    # Per-event pipeline
    # ------------------------------------------------------------------

    async def handle_transfer(self, event: TransferEvent) -> SaleRecord | None:
        """Run the sale pipeline for one Transfer. Never raises except on cancellation.

        Returns:
            The emitted SaleRecord, or None if nothing was emitted.
        """
        reserved_key: str | None = None
        emitted = False
        with bound_contextvars(
            tx_hash_masked=mask_address(event.transaction_hash),
            token_id=event.token_id,
        ):
            try:
                tx = await self._fetcher.fetch_transaction(event.transaction_hash)
                if not self._classifier.is_sale_candidate(tx):
                    return None

                receipt = await self._fetcher.fetch(event.transaction_hash)
                context = TransactionContext(
                    transaction=tx,
                    receipt=receipt,
                    token_ids=self._classifier.extract_token_ids(receipt),
                )
                candidate = self._classifier.classify(event, context)
                if candidate is None:
                    return None

                key = sale_key(
                    candidate.primary_token_id,
                    candidate.transaction_hash,
                    is_bulk=candidate.is_bulk_sale,
                )
                if not await self._dedup.reserve(key):
                    return None
                reserved_key = key

                metadata = await self._metadata.resolve_for_sale(
                    self._contract, candidate.token_ids
                )
                record = self.build_record(candidate, metadata)
                await self._channel.put(
                    SaleMessage.create(
                        payload=record,
                        metadata={"dedup_key": key, "block_number": event.block_number},
                    )
                )
                emitted = True
                self._logger.info(
                    "sale_emitted",
                    dedup_key=key,
                    currency=candidate.currency.value,
                    price_per_item=record.price_per_item,
                    total_price=record.total_price,
                    transfer_count=record.transfer_count,
                    is_bulk_sale=record.is_bulk_sale,
                )
                return record
            except ReceiptFetchError as e:
                self._logger.warning(
                    "sale_candidate_dropped",
                    reason="receipt_fetch_failed",
                    attempts=e.attempts,
                    error_message=str(e),
                )
                return None
            except Exception as e:
                self._logger.exception(
                    "sale_pipeline_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return None
            finally:
                if reserved_key is not None and not emitted:
                    await self._dedup.release(reserved_key)

    def build_record(self, candidate: SaleCandidate, metadata: SaleMetadata) -> SaleRecord:
        """Assemble the canonical SaleRecord (decimal strings, display id, links)."""
        links = self._settings.links
        token_id = candidate.primary_token_id
        item_url = links.item_url_template.replace(
            "{contract}", self._contract_display
        ).replace("{tokenId}", str(token_id))
        tx_url = links.tx_url_template.replace("{txHash}", candidate.transaction_hash)
        return SaleRecord(
            token_id=str(token_id),
            display_token_id=str(token_id + links.token_id_offset),
            price_per_item=format_units(candidate.price_per_item_wei),
            total_price=format_units(candidate.total_price_wei),
            transfer_count=candidate.transfer_count,
            is_bulk_sale=candidate.is_bulk_sale,
            is_wape_sale=candidate.is_wape_sale,
            currency=candidate.currency,
            buyer=_checksum(candidate.buyer_address),
            seller=_checksum(candidate.seller_address),
            transaction_hash=candidate.transaction_hash,
            item_url=item_url,
            tx_url=tx_url,
            marketplace=links.marketplace_name,
            token_ids=tuple(str(t) for t in candidate.token_ids),
            image_urls=metadata.image_urls,
            traits=metadata.traits,
        )

    async def health_check(self) -> dict[str, Any]:
        """Report node reachability, head block, whether it is the configured chain and held sale keys."""
        try:
            block = await self._rpc.get_block_number()
            chain_id = await self._rpc.get_chain_id()
        except Exception as e:
            self._logger.warning(
                "listener_health_check_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return {"status": "unhealthy", "provider_connected": False}
        return {
            "status": "healthy",
            "last_block": block,
            "provider_connected": chain_id == self._settings.chain.chain_id,
            "next_block": self._next_block,
            "in_flight": self.in_flight,
            "dedup_keys": await self._dedup.reserved_count(),
        }
