"""Dependency injection."""

from nft_sales_tracker.DI.container import Container

__all__ = ["Container"]
