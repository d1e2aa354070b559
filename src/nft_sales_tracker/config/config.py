# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. CHAIN__RPC_URL, METADATA__GATEWAYS.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(raw: str) -> list[str]:
    """Parse a comma-separated string into a list of stripped, non-empty items."""
    if not raw or not raw.strip():
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "nft-sales-tracker"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"
    debug_mode: bool = Field(
        default=False,
        description="Log per-event sale detection decisions at INFO instead of DEBUG.",
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    # Per-target levels (only the 5 standard levels)
    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/nft_sales_tracker.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """HTTP transport configuration (JSON-RPC POSTs and metadata GETs)."""

    model_config = SettingsConfigDict(extra="ignore")

    timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Maximum number of attempts for a failed HTTP request.",
    )


class ChainSettings(BaseSettings):
    """Watched contract, marketplace allow-list and RPC endpoint (from env CHAIN__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    rpc_url: str = Field(
        default="https://apechain.drpc.org",
        description="JSON-RPC endpoint of the chain node.",
    )
    chain_id: int = Field(default=33139, description="Expected chain ID (33139 for ApeChain).")
    contract_address: str = Field(
        default="",
        description="NFT contract whose Transfer events are watched.",
    )
    # Raw string from env so pydantic-settings does not try to JSON-decode it.
    marketplace_addresses_raw: str = Field(
        default=(
            "0x0000000000000068F116a894984e2DB1123eB395,"
            "0x1d3a594EAf472ca2ceC2A8aE44478c06d6A37E22,"
            "0x224ecB4Eae96d31372D1090c3B0233C8310dBbaB"
        ),
        description="Marketplace contracts, comma-separated. Env: CHAIN__MARKETPLACE_ADDRESSES.",
        validation_alias="marketplace_addresses",
    )
    bid_acceptance_address: str = Field(
        default="0x224ecB4Eae96d31372D1090c3B0233C8310dBbaB",
        description="Marketplace contract whose calls settle in the wrapped token (WAPE).",
    )
    poll_seconds: float = Field(
        default=4.0,
        ge=0.5,
        le=60.0,
        description="Polling interval in seconds for new Transfer logs.",
    )
    start_block: Optional[int] = Field(
        default=None,
        ge=0,
        description="First block to scan. Defaults to the chain head at startup.",
    )
    max_block_range: int = Field(
        default=500,
        ge=1,
        le=10_000,
        description="Maximum number of blocks per eth_getLogs query.",
    )
    confirmations: int = Field(
        default=1,
        ge=0,
        le=64,
        description="Blocks to stay behind the reported head when scanning logs.",
    )

    @computed_field
    @property
    def marketplace_addresses(self) -> list[str]:
        """Parse comma-separated marketplace_addresses_raw into a list."""
        return _split_csv(self.marketplace_addresses_raw)


class ReceiptSettings(BaseSettings):
    """Retry policy for transaction and receipt lookups (from env RECEIPTS__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    max_retries: int = Field(default=3, ge=0, le=10)
    backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=30.0,
        description="Retry n waits n * backoff_seconds.",
    )


class MetadataSettings(BaseSettings):
    """Token metadata resolution (from env METADATA__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    gateways_raw: str = Field(
        default=(
            "https://nftstorage.link/ipfs/,"
            "https://cloudflare-ipfs.com/ipfs/,"
            "https://ipfs.io/ipfs/,"
            "https://gateway.pinata.cloud/ipfs/,"
            "https://dweb.link/ipfs/"
        ),
        description="IPFS gateways in probe order, comma-separated. Env: METADATA__GATEWAYS.",
        validation_alias="gateways",
    )
    probe_timeout_seconds: float = Field(default=5.0, ge=0.1, le=60.0)
    max_bulk_images: int = Field(
        default=4,
        ge=1,
        le=20,
        description="Number of tokens of a bulk sale that get an image lookup.",
    )

    @computed_field
    @property
    def gateways(self) -> list[str]:
        """Parse comma-separated gateways_raw into a list (order preserved)."""
        return _split_csv(self.gateways_raw)


class LinkSettings(BaseSettings):
    """Display fields attached to every sale record (from env LINKS__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    marketplace_name: str = "Magic Eden"
    item_url_template: str = "https://magiceden.io/item-details/apechain/{contract}/{tokenId}"
    tx_url_template: str = "https://apescan.io/tx/{txHash}"
    token_id_offset: int = 0


class ChannelSettings(BaseSettings):
    """Sale channel (queue between listener and consumers)."""

    model_config = SettingsConfigDict(extra="ignore")

    queue_size: int = Field(default=1000, ge=1, le=100_000)


class ConsoleNotificationSettings(BaseSettings):
    """Console notification settings."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. CHAIN__CONTRACT_ADDRESS, RECEIPTS__MAX_RETRIES.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    chain: ChainSettings = Field(default_factory=ChainSettings)
    receipts: ReceiptSettings = Field(default_factory=ReceiptSettings)
    metadata: MetadataSettings = Field(default_factory=MetadataSettings)
    links: LinkSettings = Field(default_factory=LinkSettings)
    channel: ChannelSettings = Field(default_factory=ChannelSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.:
        - from_env(chain={"contract_address": "0x..."})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from nft_sales_tracker.config import get_settings

        settings = get_settings()
        rpc_url = settings.chain.rpc_url
    """
    return Settings()
