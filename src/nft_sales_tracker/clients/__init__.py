"""HTTP and JSON-RPC clients."""

from nft_sales_tracker.clients.http import AsyncHttpClient
from nft_sales_tracker.clients.rpc_client import RpcClient

__all__ = ["AsyncHttpClient", "RpcClient"]
