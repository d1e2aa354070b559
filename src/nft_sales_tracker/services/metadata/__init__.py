# -*- coding: utf-8 -*-
"""Token metadata resolution."""

from nft_sales_tracker.services.metadata.metadata_resolver import (
    MetadataResolver,
    content_path,
    expand_id_template,
)

__all__ = ["MetadataResolver", "content_path", "expand_id_template"]
