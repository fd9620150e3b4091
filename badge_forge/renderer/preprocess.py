"""Icon preprocessing: raw bitmaps into canvas-sized alpha masks.

A mask is a Pillow ``"L"`` image the size of the output canvas. Only coverage
survives preprocessing; the source colors are discarded because every layer is
re-tinted at composite time.

Resampling is fixed to nearest neighbor. Crisp edges keep the number of
distinct alpha levels close to the source's, which is what lets the
three-entry palette in :mod:`badge_forge.renderer.quantize` reproduce the
badge without visible fringing.
"""

import math
from typing import Optional, Tuple

from PIL import Image

RESAMPLE = Image.Resampling.NEAREST


def scaled_size(source_size: Tuple[int, int], scale: float) -> Tuple[int, int]:
    """Return ``floor(dim * scale)`` for both axes."""
    width, height = source_size
    return math.floor(width * scale), math.floor(height * scale)


def centered_offset(canvas_size: int, size: Tuple[int, int]) -> Tuple[int, int]:
    """Top-left corner that centers ``size`` on a square canvas.

    Odd remainders round toward the top-left (floor division) on both axes.
    Sizes larger than the canvas give negative offsets; the overflow is clipped.
    """
    width, height = size
    return (canvas_size - width) // 2, (canvas_size - height) // 2


def build_mask(
    bitmap: Optional[Image.Image], scale: float, canvas_size: int
) -> Optional[Image.Image]:
    """Scale ``bitmap`` by ``scale``, center it, and keep only its alpha.

    Args:
        bitmap: Decoded source raster, or ``None`` if the asset is missing.
        scale: Scale factor in ``(0, 1]``.
        canvas_size: Edge length of the square output mask.

    Returns:
        Optional[Image.Image]: ``"L"`` mask of ``canvas_size`` squared, or
        ``None`` when there is no bitmap or the scaled size collapses to zero.

    Raises:
        ValueError: If ``scale`` is outside ``(0, 1]``.
    """
    if not 0.0 < scale <= 1.0:
        raise ValueError(f"scale must be in (0, 1], got {scale}")
    if bitmap is None:
        return None

    width, height = scaled_size(bitmap.size, scale)
    if width <= 0 or height <= 0:
        return None

    if bitmap.mode != "RGBA":
        bitmap = bitmap.convert("RGBA")
    alpha = bitmap.getchannel("A")
    if (width, height) != alpha.size:
        alpha = alpha.resize((width, height), resample=RESAMPLE)

    mask = Image.new("L", (canvas_size, canvas_size), 0)
    mask.paste(alpha, centered_offset(canvas_size, (width, height)))
    return mask
