# -*- coding: utf-8 -*-
"""
Entry point for the NFT sales tracker.

Orchestrates: logging, settings, container, notifications, sale consumer,
chain listener, shutdown (SIGINT/SIGTERM or CancelledError).
Sales flow: listener -> sale channel -> consumer -> SaleDetectedEvent -> notifier.

Run with: nft-sales-tracker  (or python -m nft_sales_tracker)

Notebook usage:
    from nft_sales_tracker.main import run
    await run()  # Interrupt kernel to stop; system will shut down on CancelledError.
"""
from __future__ import annotations

import asyncio
import signal
import structlog
from typing import Any

from nft_sales_tracker.DI import Container
from nft_sales_tracker.config import Settings, get_settings
from nft_sales_tracker.exceptions import MissingRequiredConfigError, SubscriptionError
from nft_sales_tracker.logging.config import configure_logging
from nft_sales_tracker.notifications.types import NotificationMessage
from nft_sales_tracker.utils import is_hex_address, mask_address


def _setup_signals(shutdown_event: asyncio.Event) -> None:
    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, shutdown_event.set)
    except NotImplementedError:
        pass  # Windows has no add_signal_handler


def validate_settings(settings: Settings, logger: Any) -> None:
    """Fail fast on configuration the listener cannot run without."""
    chain = settings.chain
    if not is_hex_address(chain.contract_address.strip()):
        logger.error(
            "main_missing_contract_address",
            message="CHAIN__CONTRACT_ADDRESS is not set or not a 20-byte hex address",
        )
        raise MissingRequiredConfigError("CHAIN__CONTRACT_ADDRESS")
    if not chain.marketplace_addresses:
        logger.error(
            "main_missing_marketplaces",
            message="CHAIN__MARKETPLACE_ADDRESSES is empty",
        )
        raise MissingRequiredConfigError("CHAIN__MARKETPLACE_ADDRESSES")


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    settings = get_settings()
    validate_settings(settings, logger)

    container = Container()
    http_client = container.http_client()
    listener = container.chain_listener()
    consumer = container.sale_consumer()
    sale_channel = container.sale_channel()
    sale_notifier = container.sale_notifier()
    notification_service = container.notification_service()
    await notification_service.initialize()
    sale_notifier.start()
    shutdown_event = asyncio.Event()
    _setup_signals(shutdown_event)

    await consumer.start()
    try:
        try:
            await listener.start()
        except SubscriptionError as e:
            logger.error("main_subscription_failed", error_message=str(e))
            raise

        health = await listener.health_check()
        logger.info(
            "main_tracking_started",
            contract=mask_address(settings.chain.contract_address),
            marketplace_count=len(settings.chain.marketplace_addresses),
            poll_seconds=settings.chain.poll_seconds,
            **health,
        )
        notification_service.notify(
            NotificationMessage(
                event_type="system_started",
                message="NFT sales tracker started",
                payload={
                    "contract": mask_address(settings.chain.contract_address),
                    "last_block": health.get("last_block"),
                },
            )
        )

        try:
            await shutdown_event.wait()
        except asyncio.CancelledError:
            logger.info("main_cancelled")
            raise
    finally:
        await listener.stop()
        logger.info(
            "main_draining_sale_channel",
            channel_pending=sale_channel.qsize(),
            channel_maxsize=sale_channel.maxsize,
        )
        sale_channel.shutdown()
        await sale_channel.join()
        await consumer.stop()
        sale_notifier.stop()

        notification_service.notify(
            NotificationMessage(
                event_type="system_stopped",
                message="NFT sales tracker stopped",
                payload={"sales_published": consumer.published_count},
            )
        )
        await notification_service.shutdown()
        await http_client.aclose()
        logger.info("main_shutdown_complete")


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


__all__ = ["run", "main", "validate_settings"]

if __name__ == "__main__":
    main()
