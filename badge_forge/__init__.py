"""badge_forge: combinatorial badge rendering.

A badge is a border shape tinted with a secondary color, a symbol tinted with
a primary color centered on top, and the border's outline in the primary
color. Every (symbol, border, primary, secondary) combination is rendered to
an indexed PNG named ``"{symbol}-{border}-{color1}-{color2}.png"``.

Typical use::

    from badge_forge.config import RenderConfig
    from badge_forge.sources.loader import load_catalog
    from badge_forge.scheduler import Scheduler

    config = RenderConfig(asset_root="assets", output_dir="images")
    Scheduler(load_catalog(config), config).run()
"""

__version__ = "0.1.0"
