"""JSON-RPC client for the chain node (blocks, logs, transactions, receipts, eth_call)."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, cast

import structlog

from nft_sales_tracker.exceptions import RpcError
from nft_sales_tracker.utils.validation import hex_to_int, mask_address

if TYPE_CHECKING:
    from nft_sales_tracker.clients.http import AsyncHttpClient
    from nft_sales_tracker.config import Settings

# ERC-721 / ERC-1155 metadata selectors (bytes4(keccak256(...)))
SELECTOR_TOKEN_URI = "0xc87b56dd"  # tokenURI(uint256)
SELECTOR_URI = "0x0e89341c"  # uri(uint256)


def encode_uint256(value: int) -> str:
    """ABI-encode a uint256 argument as 64 hex chars (no 0x)."""
    if value < 0:
        raise ValueError("uint256 must be non-negative")
    return format(value, "064x")


def decode_abi_string(hex_str: str) -> str:
    """Decode an ABI-encoded `string` return value.

    Standard encoding is offset (32 bytes), length (32 bytes), padded data.
    Raises ValueError on truncated or empty data.
    """
    if not hex_str or hex_str == "0x":
        raise ValueError("empty eth_call result")
    raw = bytes.fromhex(hex_str[2:] if hex_str.startswith("0x") else hex_str)
    if len(raw) < 64:
        raise ValueError("eth_call result too short for an ABI string")
    offset = int.from_bytes(raw[0:32], byteorder="big")
    if offset + 32 > len(raw):
        raise ValueError("ABI string offset out of range")
    length = int.from_bytes(raw[offset : offset + 32], byteorder="big")
    start = offset + 32
    if start + length > len(raw):
        raise ValueError("ABI string length out of range")
    return raw[start : start + length].decode("utf-8", "replace")


class RpcClient:
    """Client for the chain JSON-RPC endpoint.

    Errors reported by the node are raised as RpcError (with its code);
    transport failures surface as HttpRequestError from the HTTP client.
    """

    def __init__(
        self,
        http_client: AsyncHttpClient,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the RPC client.

        Args:
            http_client: HTTP client for POST requests (JSON-RPC).
            settings: Configuration (uses settings.chain.rpc_url).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._ids = itertools.count(1)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _rpc_url(self) -> str:
        return self._settings.chain.rpc_url.rstrip("/")

    async def call(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its `result`.

        Raises:
            RpcError: If the response carries an error object or is malformed.
            HttpRequestError: If the HTTP request fails after retries.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        response = await self._http.post(self._rpc_url(), json=payload)
        if not isinstance(response, dict):
            raise RpcError(
                f"Unexpected RPC response type: {type(response).__name__}",
                method=method,
            )
        resp_dict = cast(dict[str, Any], response)
        if "error" in resp_dict and resp_dict["error"] is not None:
            err = resp_dict["error"]
            code: int | None = None
            data: Any = None
            if isinstance(err, dict):
                err_d = cast(dict[str, Any], err)
                msg = str(err_d.get("message", err_d))
                raw_code = err_d.get("code")
                code = raw_code if isinstance(raw_code, int) else None
                data = err_d.get("data")
            else:
                msg = str(err)
            self._logger.debug(
                "rpc_error_response",
                rpc_method=method,
                rpc_error_code=code,
                rpc_error_message=msg,
            )
            raise RpcError(f"RPC error: {msg}", code=code, method=method, data=data)
        return resp_dict.get("result")

    async def get_block_number(self) -> int:
        return hex_to_int(await self.call("eth_blockNumber", []))

    async def get_chain_id(self) -> int:
        return hex_to_int(await self.call("eth_chainId", []))

    async def get_transaction(self, tx_hash: str) -> dict[str, Any] | None:
        """Return the raw transaction object, or None if the node does not know it."""
        result = await self.call("eth_getTransactionByHash", [tx_hash])
        return cast(dict[str, Any], result) if isinstance(result, dict) else None

    async def get_transaction_receipt(self, tx_hash: str) -> dict[str, Any] | None:
        """Return the raw receipt object, or None if it is not yet available."""
        result = await self.call("eth_getTransactionReceipt", [tx_hash])
        return cast(dict[str, Any], result) if isinstance(result, dict) else None

    async def get_logs(
        self,
        *,
        address: str,
        topics: list[str | None],
        from_block: int,
        to_block: int,
    ) -> list[dict[str, Any]]:
        """Return logs emitted by address matching topics in [from_block, to_block]."""
        result = await self.call(
            "eth_getLogs",
            [
                {
                    "address": address,
                    "topics": topics,
                    "fromBlock": hex(from_block),
                    "toBlock": hex(to_block),
                }
            ],
        )
        if not isinstance(result, list):
            raise RpcError("eth_getLogs returned a non-list result", method="eth_getLogs")
        return [cast(dict[str, Any], entry) for entry in result if isinstance(entry, dict)]

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        """Perform eth_call (read-only contract call) and return the hex result."""
        to_norm = to.strip()
        if not to_norm.startswith("0x"):
            to_norm = "0x" + to_norm
        result = await self.call("eth_call", [{"to": to_norm, "data": data}, block])
        return str(result) if result is not None else "0x"

    async def token_uri(self, contract_address: str, token_id: int) -> str:
        """Call ERC-721 tokenURI(uint256)."""
        raw = await self.eth_call(contract_address, SELECTOR_TOKEN_URI + encode_uint256(token_id))
        return decode_abi_string(raw)

    async def uri(self, contract_address: str, token_id: int) -> str:
        """Call ERC-1155 uri(uint256)."""
        raw = await self.eth_call(contract_address, SELECTOR_URI + encode_uint256(token_id))
        value = decode_abi_string(raw)
        self._logger.debug(
            "rpc_uri_resolved",
            contract_masked=mask_address(contract_address),
            token_id=token_id,
        )
        return value
