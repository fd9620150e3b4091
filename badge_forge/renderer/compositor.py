"""Layered compositing of tinted masks.

A badge is always the same three-layer stack, back to front:

1. border base, tinted with the secondary color (``color2``),
2. symbol, tinted with the primary color (``color1``), already scaled down,
3. border outline, tinted with the primary color.

Any layer may be absent (missing asset) and is then skipped. Each layer is a
flat color whose alpha channel is the mask, composited with Porter-Duff
"over" onto the canvas.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from PIL import Image

from badge_forge.catalog import AssetCatalog
from badge_forge.job import RenderJob
from badge_forge.renderer.canvas import clear_canvas
from badge_forge.types import RGB


@dataclass(frozen=True, eq=False)
class TintLayer:
    mask: Optional[Image.Image]
    color: RGB


BadgeLayers = Tuple[TintLayer, TintLayer, TintLayer]


def badge_layers(catalog: AssetCatalog, job: RenderJob) -> BadgeLayers:
    """Resolve a job's indices into the fixed border/symbol/outline stack."""
    symbol = catalog.icon(job.symbol_index)
    border = catalog.icon(job.border_index)
    color1 = catalog.color(job.color1_index).rgb
    color2 = catalog.color(job.color2_index).rgb
    return (
        TintLayer(border.alpha_mask, color2),
        TintLayer(symbol.alpha_mask, color1),
        TintLayer(border.outline_mask, color1),
    )


def tint(scratch: Image.Image, mask: Image.Image, color: RGB) -> Image.Image:
    """Fill ``scratch`` with ``color`` and use ``mask`` as its alpha."""
    scratch.paste(color + (255,), (0, 0, scratch.width, scratch.height))
    scratch.putalpha(mask)
    return scratch


def composite(
    canvas: Image.Image, layers: Sequence[TintLayer], scratch: Image.Image
) -> Image.Image:
    """Clear ``canvas`` and draw ``layers`` onto it in order.

    Args:
        canvas: RGBA destination, modified in place.
        layers: Tint layers, back to front. Layers without a mask are skipped.
        scratch: RGBA buffer of the canvas size, overwritten per layer.

    Returns:
        Image.Image: ``canvas``, for chaining.

    Raises:
        ValueError: If a buffer or mask does not match the canvas size.
    """
    if scratch.size != canvas.size:
        raise ValueError(f"Scratch size {scratch.size} != canvas size {canvas.size}")
    clear_canvas(canvas)
    for layer in layers:
        if layer.mask is None:
            continue
        if layer.mask.size != canvas.size:
            raise ValueError(
                f"Mask size {layer.mask.size} != canvas size {canvas.size}"
            )
        canvas.alpha_composite(tint(scratch, layer.mask, layer.color))
    return canvas
