# -*- coding: utf-8 -*-
"""Unit tests for startup validation and container wiring."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest

from nft_sales_tracker.DI import Container
from nft_sales_tracker.config import ChainSettings, Settings
from nft_sales_tracker.exceptions import MissingRequiredConfigError
from nft_sales_tracker.main import validate_settings
from nft_sales_tracker.services.listener import ChainListener


def test_validate_settings_requires_contract(settings_factory: Callable[..., Any]) -> None:
    with pytest.raises(MissingRequiredConfigError):
        validate_settings(settings_factory(chain={"contract_address": ""}), Mock())


def test_validate_settings_requires_marketplaces(settings_factory: Callable[..., Any]) -> None:
    with pytest.raises(MissingRequiredConfigError):
        validate_settings(settings_factory(chain={"marketplace_addresses": []}), Mock())


def test_validate_settings_accepts_complete_config(settings: Any) -> None:
    validate_settings(settings, Mock())


async def test_container_wires_listener_and_shares_channel() -> None:
    container = Container()
    container.config.override(
        Settings(chain=ChainSettings(contract_address="0x7a3f2b1c9d8e4f5a6b7c8d9e0f1a2b3c4d5e6f70"))
    )
    try:
        listener = container.chain_listener()
        assert isinstance(listener, ChainListener)
        assert container.chain_listener() is listener
        assert container.sale_channel() is container.sale_channel()
    finally:
        container.config.reset_override()
