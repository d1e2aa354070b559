"""ReceiptFetcher: transaction and receipt lookups with bounded, linearly increasing retry."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bound_contextvars

from nft_sales_tracker.exceptions import HttpRequestError, ReceiptFetchError, RpcError
from nft_sales_tracker.models.chain import TransactionInfo, TransactionReceipt
from nft_sales_tracker.utils.validation import is_tx_hash, mask_address

if TYPE_CHECKING:
    from nft_sales_tracker.clients.rpc_client import RpcClient
    from nft_sales_tracker.config import Settings


class _NotYetAvailable(Exception):
    """The node answered null: the transaction or receipt is not indexed yet."""


def _is_retriable(error: Exception) -> bool:
    if isinstance(error, RpcError):
        return error.is_retriable
    return isinstance(error, (HttpRequestError, _NotYetAvailable, asyncio.TimeoutError))


class ReceiptFetcher:
    """Fetches a transaction's receipt (and the transaction itself) from the node.

    Retriable failures (server-class RPC errors, transport errors, a receipt
    the node does not have yet) are retried up to settings.receipts.max_retries
    times; retry n waits n * backoff_seconds. Anything else propagates on
    the first attempt. Exhaustion raises ReceiptFetchError.
    """

    def __init__(
        self,
        rpc_client: RpcClient,
        settings: Settings,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            rpc_client: JSON-RPC client (injected).
            settings: Application settings (uses settings.receipts).
            sleep: Awaitable sleep used between attempts (injected for tests).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._rpc = rpc_client
        self._max_retries = settings.receipts.max_retries
        self._backoff_seconds = settings.receipts.backoff_seconds
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def backoff_delay(self, retry: int) -> float:
        """Delay before retry number `retry` (1-based): 1x, 2x, 3x the base."""
        return self._backoff_seconds * retry

    async def fetch(self, tx_hash: str) -> TransactionReceipt:
        """Return the parsed receipt for tx_hash.

        Raises:
            ValueError: If tx_hash is not a 32-byte hex hash.
            RpcError: On a non-retriable node error.
            ReceiptFetchError: When retries are exhausted.
        """
        raw = await self._with_retry("receipt", tx_hash, self._rpc.get_transaction_receipt)
        return TransactionReceipt.from_rpc(raw)

    async def fetch_transaction(self, tx_hash: str) -> TransactionInfo:
        """Return the originating transaction (to, value) with the same retry policy."""
        raw = await self._with_retry("transaction", tx_hash, self._rpc.get_transaction)
        return TransactionInfo.from_rpc(raw)

    async def _with_retry(
        self,
        kind: str,
        tx_hash: str,
        lookup: Callable[[str], Awaitable[dict[str, Any] | None]],
    ) -> dict[str, Any]:
        if not is_tx_hash(tx_hash):
            raise ValueError(f"Invalid transaction hash: {tx_hash!r}")

        attempts = self._max_retries + 1
        last_error: Exception | None = None
        with bound_contextvars(
            receipt_kind=kind,
            tx_hash_masked=mask_address(tx_hash),
        ):
            for attempt in range(1, attempts + 1):
                try:
                    result = await lookup(tx_hash)
                    if result is None:
                        raise _NotYetAvailable(f"{kind} not available yet")
                    if attempt > 1:
                        self._logger.debug("receipt_fetch_recovered", receipt_attempt=attempt)
                    return result
                except Exception as e:
                    if not _is_retriable(e):
                        raise
                    last_error = e
                    if attempt == attempts:
                        break
                    delay = self.backoff_delay(attempt)
                    self._logger.debug(
                        "receipt_fetch_retry",
                        receipt_attempt=attempt,
                        receipt_retry_delay_seconds=delay,
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                    await self._sleep(delay)

            self._logger.warning(
                "receipt_fetch_exhausted",
                receipt_attempts=attempts,
                error_type=type(last_error).__name__ if last_error else None,
                error_message=str(last_error) if last_error else None,
            )
            raise ReceiptFetchError(
                f"Could not fetch {kind} for {tx_hash} after {attempts} attempts",
                transaction_hash=tx_hash,
                attempts=attempts,
                cause=last_error,
            ) from last_error
