"""Immutable asset catalog.

The :class:`AssetCatalog` is built once at startup and then passed by
reference to every component. It owns:

* the ordered color table (:class:`ColorEntry`), index = table row,
* the ordered icon table (:class:`IconAsset`) with prebuilt masks.

Masks are produced by :func:`badge_forge.renderer.preprocess.build_mask` with
the scale that matches each icon's role, so the render path never resamples.
Nothing mutates a catalog after :func:`build_catalog` returns; masks are shared
read-only by all worker threads.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from PIL import Image
from pyrsistent import pvector
from pyrsistent.typing import PVector

from badge_forge.config import RenderConfig
from badge_forge.renderer.preprocess import build_mask
from badge_forge.types import RGB, RGBA, Affinity, ColorIndex, IconIndex, Layer

logger = logging.getLogger(__name__)

BitmapLoader = Callable[[str], Optional[Image.Image]]


@dataclass(frozen=True)
class ColorRow:
    """One decoded row of the color table."""

    r: int
    g: int
    b: int
    affinity: Affinity


@dataclass(frozen=True)
class IconRow:
    """One decoded row of the icon table. Empty names mean no asset."""

    icon: str
    outline: str
    layer: Layer


@dataclass(frozen=True)
class ColorEntry:
    index: ColorIndex
    r: int
    g: int
    b: int
    affinity: Affinity

    @property
    def rgb(self) -> RGB:
        return (self.r, self.g, self.b)

    @property
    def rgba(self) -> RGBA:
        return (self.r, self.g, self.b, 255)


@dataclass(frozen=True, eq=False)
class IconAsset:
    """An icon with its canvas-sized masks.

    Attributes:
        index: Row position in the icon table.
        layer: Slot the icon occupies in the badge stack.
        alpha_mask: Coverage of the icon itself, or ``None`` if the bitmap was
            missing. Symbol masks have the symbol scale baked in.
        outline_mask: Coverage of the outline drawn above the symbol. Only
            built for border icons.
    """

    index: IconIndex
    layer: Layer
    alpha_mask: Optional[Image.Image] = None
    outline_mask: Optional[Image.Image] = None


@dataclass(frozen=True)
class AssetCatalog:
    colors: PVector[ColorEntry]
    icons: PVector[IconAsset]
    canvas_size: int

    def color(self, index: ColorIndex) -> ColorEntry:
        if not 0 <= index < len(self.colors):
            raise IndexError(f"Color index out of range: {index}")
        return self.colors[index]

    def icon(self, index: IconIndex) -> IconAsset:
        if not 0 <= index < len(self.icons):
            raise IndexError(f"Icon index out of range: {index}")
        return self.icons[index]

    def primary_colors(self) -> List[ColorEntry]:
        return [c for c in self.colors if c.affinity == Affinity.PRIMARY]

    def secondary_colors(self) -> List[ColorEntry]:
        return [c for c in self.colors if c.affinity == Affinity.SECONDARY]

    def symbol_icons(self) -> List[IconAsset]:
        return [i for i in self.icons if i.layer == Layer.SYMBOL]

    def border_icons(self) -> List[IconAsset]:
        return [i for i in self.icons if i.layer == Layer.BORDER]


def _load_mask(
    name: str,
    load_bitmap: BitmapLoader,
    scale: float,
    canvas_size: int,
    icon_index: IconIndex,
) -> Optional[Image.Image]:
    if not name:
        return None
    bitmap = load_bitmap(name)
    if bitmap is None:
        logger.warning("Icon %d: asset %r unavailable, layer omitted", icon_index, name)
        return None
    return build_mask(bitmap, scale, canvas_size)


def build_catalog(
    color_rows: Sequence[ColorRow],
    icon_rows: Sequence[IconRow],
    load_bitmap: BitmapLoader,
    config: RenderConfig,
) -> AssetCatalog:
    """Build the run's immutable catalog from decoded table rows.

    Each icon bitmap is loaded and preprocessed exactly once. Missing or
    undecodable bitmaps leave the corresponding mask as ``None``; jobs that
    reference it simply omit that layer.
    """
    colors = pvector(
        ColorEntry(index=i, r=row.r, g=row.g, b=row.b, affinity=row.affinity)
        for i, row in enumerate(color_rows)
    )

    icons: List[IconAsset] = []
    for i, row in enumerate(icon_rows):
        if row.layer == Layer.SYMBOL:
            icons.append(
                IconAsset(
                    index=i,
                    layer=row.layer,
                    alpha_mask=_load_mask(
                        row.icon, load_bitmap, config.symbol_scale, config.canvas_size, i
                    ),
                )
            )
        else:
            icons.append(
                IconAsset(
                    index=i,
                    layer=row.layer,
                    alpha_mask=_load_mask(
                        row.icon, load_bitmap, config.border_scale, config.canvas_size, i
                    ),
                    outline_mask=_load_mask(
                        row.outline,
                        load_bitmap,
                        config.border_scale,
                        config.canvas_size,
                        i,
                    ),
                )
            )

    catalog = AssetCatalog(
        colors=colors, icons=pvector(icons), canvas_size=config.canvas_size
    )
    logger.info(
        "Catalog built: %d colors (%d primary, %d secondary), %d icons (%d symbol, %d border)",
        len(catalog.colors),
        len(catalog.primary_colors()),
        len(catalog.secondary_colors()),
        len(catalog.icons),
        len(catalog.symbol_icons()),
        len(catalog.border_icons()),
    )
    return catalog
