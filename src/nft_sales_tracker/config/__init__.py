"""Configuration subpackage."""

from nft_sales_tracker.config.config import (
    ApiSettings,
    AppSettings,
    ChainSettings,
    ChannelSettings,
    ConsoleNotificationSettings,
    LinkSettings,
    LoggingSettings,
    MetadataSettings,
    ReceiptSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "ChainSettings",
    "ChannelSettings",
    "ConsoleNotificationSettings",
    "LinkSettings",
    "LoggingSettings",
    "MetadataSettings",
    "ReceiptSettings",
    "Settings",
    "get_settings",
]
