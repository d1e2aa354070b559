"""NFT sales tracker: follows an ERC-721 contract and emits one record per marketplace sale."""

from nft_sales_tracker.clients import AsyncHttpClient, RpcClient
from nft_sales_tracker.config import get_settings
from nft_sales_tracker.DI import Container
from nft_sales_tracker.models import SaleRecord
from nft_sales_tracker.services import ChainListener

__version__ = "0.1.0"
__all__ = [
    "AsyncHttpClient",
    "ChainListener",
    "Container",
    "RpcClient",
    "SaleRecord",
    "get_settings",
]
