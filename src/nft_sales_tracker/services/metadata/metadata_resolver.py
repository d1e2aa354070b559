"""MetadataResolver: token image and traits from the on-chain metadata pointer.

tokenURI(uint256) is tried first, uri(uint256) second. Content-addressed
(ipfs://) pointers are resolved against an ordered list of gateways: each
gets a HEAD probe bounded by a short timeout and the first that answers
wins; if none does, the first gateway's URL is used anyway.

Results are cached per (contract, token id) for the process lifetime.
Token metadata is treated as immutable after mint, so entries are never
invalidated.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, cast

import structlog
from cachetools import Cache
from structlog.contextvars import bound_contextvars

from nft_sales_tracker.models.token_metadata import SaleMetadata, TokenMetadata, Trait
from nft_sales_tracker.utils.validation import mask_address, normalize_address

if TYPE_CHECKING:
    from nft_sales_tracker.clients.http import AsyncHttpClient
    from nft_sales_tracker.clients.rpc_client import RpcClient
    from nft_sales_tracker.config import Settings

IPFS_SCHEME = "ipfs://"

_CacheKey = tuple[str, int]


def content_path(uri: str) -> str | None:
    """Return the gateway-relative path of an ipfs:// URI, or None for other schemes.

    Handles both ipfs://<cid>/<path> and the legacy ipfs://ipfs/<cid>/<path>.
    """
    if not uri.startswith(IPFS_SCHEME):
        return None
    path = uri[len(IPFS_SCHEME):]
    if path.startswith("ipfs/"):
        path = path[len("ipfs/"):]
    return path.lstrip("/")


def expand_id_template(uri: str, token_id: int) -> str:
    """Substitute the ERC-1155 {id} placeholder with the 64-hex-digit token id."""
    if "{id}" not in uri:
        return uri
    return uri.replace("{id}", format(token_id, "064x"))


def _gateway_url(gateway: str, path: str) -> str:
    return f"{gateway.rstrip('/')}/{path}"


class MetadataResolver:
    """Resolves and caches display metadata for tokens of any contract."""

    def __init__(
        self,
        rpc_client: RpcClient,
        http_client: AsyncHttpClient,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            rpc_client: JSON-RPC client for tokenURI/uri calls (injected).
            http_client: HTTP client for probes and metadata GETs (injected).
            settings: Application settings (uses settings.metadata).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        md = settings.metadata
        if not md.gateways:
            raise ValueError("metadata.gateways must list at least one gateway")
        self._rpc = rpc_client
        self._http = http_client
        self._gateways: tuple[str, ...] = tuple(md.gateways)
        self._probe_timeout = md.probe_timeout_seconds
        self._max_bulk_images = md.max_bulk_images
        self._tokens: Cache[_CacheKey, TokenMetadata] = Cache(maxsize=math.inf)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @staticmethod
    def _key(contract_address: str, token_id: int) -> _CacheKey:
        return (normalize_address(contract_address), int(token_id))

    async def resolve_content_uri(self, uri: str) -> str:
        """Return a fetchable URL for uri, probing gateways for ipfs:// URIs."""
        path = content_path(uri)
        if path is None:
            return uri
        for gateway in self._gateways:
            url = _gateway_url(gateway, path)
            if await self._http.probe(url, timeout_seconds=self._probe_timeout):
                self._logger.debug("ipfs_gateway_resolved", ipfs_gateway=gateway)
                return url
            self._logger.debug("ipfs_gateway_failed", ipfs_gateway=gateway)
        self._logger.info(
            "ipfs_gateways_exhausted",
            ipfs_gateways_count=len(self._gateways),
            ipfs_fallback_gateway=self._gateways[0],
        )
        return _gateway_url(self._gateways[0], path)

    async def fetch_token_uri(self, contract_address: str, token_id: int) -> str:
        """Return the metadata pointer: tokenURI(id), or uri(id) if that call fails.

        Raises:
            Exception: Whatever the uri(id) call raised when both calls fail.
        """
        try:
            return await self._rpc.token_uri(contract_address, token_id)
        except Exception as e:
            self._logger.debug(
                "token_uri_failed_trying_uri",
                error_type=type(e).__name__,
                error_message=str(e),
            )
        return expand_id_template(await self._rpc.uri(contract_address, token_id), token_id)

    async def fetch_metadata(self, contract_address: str, token_id: int) -> dict[str, Any]:
        """Fetch the metadata JSON document of a token.

        Raises:
            ValueError: If the document is not a JSON object.
        """
        pointer = await self.fetch_token_uri(contract_address, token_id)
        url = await self.resolve_content_uri(pointer)
        document = await self._http.get(url)
        if not isinstance(document, dict):
            raise ValueError(f"metadata document is not an object: {type(document).__name__}")
        return cast(dict[str, Any], document)

    async def _load(self, contract_address: str, token_id: int) -> TokenMetadata:
        """Fetch and resolve one token's document, then cache image and traits together."""
        document = await self.fetch_metadata(contract_address, token_id)
        image = document.get("image")
        image_url = await self.resolve_content_uri(image) if isinstance(image, str) and image else None
        raw_attributes = document.get("attributes")
        traits = tuple(
            t
            for t in (
                Trait.from_attribute(a)
                for a in (raw_attributes if isinstance(raw_attributes, list) else [])
            )
            if t is not None
        )
        token = TokenMetadata(image_url=image_url, traits=traits)
        self._tokens[self._key(contract_address, token_id)] = token
        return token

    async def get_token_metadata(self, contract_address: str, token_id: int) -> TokenMetadata | None:
        """Return the token's cached or freshly loaded metadata; None if it cannot be fetched.

        Failures are not cached, so a later sale of the same token tries again.
        """
        cached = self._tokens.get(self._key(contract_address, token_id))
        if cached is not None:
            return cached
        with bound_contextvars(
            contract_masked=mask_address(contract_address),
            token_id=token_id,
        ):
            try:
                return await self._load(contract_address, token_id)
            except Exception as e:
                self._logger.warning(
                    "metadata_fetch_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return None

    async def get_image_url(self, contract_address: str, token_id: int) -> str | None:
        """Return the token's resolved image URL, or None if it has none or cannot be resolved."""
        token = await self.get_token_metadata(contract_address, token_id)
        return token.image_url if token is not None else None

    async def resolve_for_sale(
        self,
        contract_address: str,
        token_ids: Sequence[int],
    ) -> SaleMetadata:
        """Metadata for a sale: images for the first N tokens of a bulk sale, image and traits for a single one.

        Tokens without a resolvable image are left out, so image_urls keeps
        token order but may be shorter than the token list.
        """
        if not token_ids:
            return SaleMetadata()
        if len(token_ids) > 1:
            selected = list(token_ids)[: self._max_bulk_images]
            self._logger.debug(
                "metadata_bulk_images",
                bulk_token_count=len(token_ids),
                bulk_image_count=len(selected),
            )
            urls = await asyncio.gather(
                *(self.get_image_url(contract_address, t) for t in selected)
            )
            return SaleMetadata(image_urls=tuple(u for u in urls if u))

        token = await self.get_token_metadata(contract_address, token_ids[0])
        if token is None:
            return SaleMetadata()
        return SaleMetadata(
            image_urls=(token.image_url,) if token.image_url else (),
            traits=token.traits,
        )

    def cache_size(self) -> int:
        """Number of tokens with cached metadata."""
        return len(self._tokens)
