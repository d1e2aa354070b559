# -*- coding: utf-8 -*-
"""Chain subscription and sale pipeline orchestration."""

from nft_sales_tracker.services.listener.chain_listener import ChainListener

__all__ = ["ChainListener"]
