"""Build an :class:`~badge_forge.catalog.AssetCatalog` from an asset directory."""

import logging
import os

from badge_forge.catalog import AssetCatalog, build_catalog
from badge_forge.config import RenderConfig
from badge_forge.errors import CatalogError
from badge_forge.sources.assets import AssetIndex
from badge_forge.sources.tables import load_color_table, load_icon_table

logger = logging.getLogger(__name__)


def load_catalog(config: RenderConfig) -> AssetCatalog:
    """Read both tables under ``config.asset_root`` and preprocess every icon.

    Raises:
        CatalogError: If the asset root or either table is unusable.
    """
    root = config.asset_root
    if not os.path.isdir(root):
        raise CatalogError(f"Asset root is not a directory: {root}")
    logger.info("Loading catalog from %s", root)
    color_rows = load_color_table(root)
    icon_rows = load_icon_table(root)
    index = AssetIndex.scan(root)
    return build_catalog(color_rows, icon_rows, index.load_bitmap, config)
