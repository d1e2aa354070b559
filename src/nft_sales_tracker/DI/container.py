# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from nft_sales_tracker.config import Settings, get_settings
from nft_sales_tracker.events.bus import get_event_bus
from nft_sales_tracker.queue.channel import SaleChannel, build_sale_channel
from nft_sales_tracker.clients.http import AsyncHttpClient
from nft_sales_tracker.clients.rpc_client import RpcClient
from nft_sales_tracker.consumers.sale_consumer import SaleConsumer
from nft_sales_tracker.notifications.notification_manager import NotificationService
from nft_sales_tracker.notifications.strategies.base import BaseNotificationStrategy
from nft_sales_tracker.notifications.strategies.console import ConsoleNotifier
from nft_sales_tracker.notifications.stylers.sale_styler import SaleNotificationStyler
from nft_sales_tracker.persistence.repositories.in_memory import InMemoryDedupRepository
from nft_sales_tracker.services.classification import SaleClassifier
from nft_sales_tracker.services.dedup import DedupGuard
from nft_sales_tracker.services.listener import ChainListener
from nft_sales_tracker.services.metadata import MetadataResolver
from nft_sales_tracker.services.notifications import SaleNotifier
from nft_sales_tracker.services.receipts import ReceiptFetcher


def _build_sale_channel(settings: Settings) -> SaleChannel:
    """Build the sale channel with size from settings."""
    return build_sale_channel(maxsize=settings.channel.queue_size)


def _build_notification_notifiers(
    settings: Settings,
    styler: SaleNotificationStyler,
) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings, styler=styler))
    return notifiers


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, HTTP/RPC clients, the sale pipeline and its consumers."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    rpc_client = providers.Singleton(
        RpcClient,
        http_client=http_client,
        settings=config,
    )

    event_bus = providers.Callable(get_event_bus)

    sale_channel = providers.Singleton(_build_sale_channel, config)

    dedup_repository = providers.Singleton(InMemoryDedupRepository)

    dedup_guard = providers.Singleton(
        DedupGuard,
        repository=dedup_repository,
    )

    receipt_fetcher = providers.Singleton(
        ReceiptFetcher,
        rpc_client=rpc_client,
        settings=config,
    )

    sale_classifier = providers.Singleton(
        SaleClassifier,
        settings=config,
    )

    metadata_resolver = providers.Singleton(
        MetadataResolver,
        rpc_client=rpc_client,
        http_client=http_client,
        settings=config,
    )

    chain_listener = providers.Singleton(
        ChainListener,
        settings=config,
        rpc_client=rpc_client,
        receipt_fetcher=receipt_fetcher,
        classifier=sale_classifier,
        dedup_guard=dedup_guard,
        metadata_resolver=metadata_resolver,
        channel=sale_channel,
    )

    sale_consumer = providers.Singleton(
        SaleConsumer,
        channel=sale_channel,
        event_bus=event_bus,
    )

    notification_styler = providers.Singleton(SaleNotificationStyler)

    notification_service = providers.Singleton(
        NotificationService,
        notifiers=providers.Callable(_build_notification_notifiers, config, notification_styler),
    )

    sale_notifier = providers.Singleton(
        SaleNotifier,
        notification_service=notification_service,
        event_bus=event_bus,
    )
