# -*- coding: utf-8 -*-
"""Sale classification."""

from nft_sales_tracker.services.classification.sale_classifier import SaleClassifier

__all__ = ["SaleClassifier"]
