"""Palette quantization of composited canvases.

Policy: a fixed three-entry palette ``[transparent, color1, color2]``. Every
canvas pixel is mapped to the nearest entry by squared distance in
premultiplied RGBA space, so partially covered pixels fall to whichever of
"empty" or "solid color" they are visually closer to. Ties resolve toward the
lower palette index.

This is paired with nearest-neighbor mask resampling (see
:mod:`badge_forge.renderer.preprocess`); a smooth kernel would produce many
intermediate alpha levels that this palette cannot represent.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import numpy.typing as npt
from PIL import Image

from badge_forge.types import RGB, RGBA, TRANSPARENT

FloatArray = npt.NDArray[np.float32]
UInt8Array = npt.NDArray[np.uint8]

MAX_PALETTE_SIZE = 256


@dataclass(frozen=True, eq=False)
class PaletteImage:
    """Indexed image: ``uint8`` index plane plus an RGBA palette.

    Attributes:
        indices: ``(height, width)`` array of palette indices.
        palette: RGBA entries; entry 0 is always fully transparent.
    """

    indices: UInt8Array
    palette: Tuple[RGBA, ...]

    def __post_init__(self) -> None:
        if not 0 < len(self.palette) <= MAX_PALETTE_SIZE:
            raise ValueError(f"Palette must have 1..256 entries, got {len(self.palette)}")
        if self.palette[0][3] != 0:
            raise ValueError("Palette entry 0 must be fully transparent")
        if self.indices.ndim != 2 or self.indices.dtype != np.uint8:
            raise ValueError("indices must be a 2-D uint8 array")

    @property
    def size(self) -> Tuple[int, int]:
        height, width = self.indices.shape
        return width, height

    @property
    def transparency(self) -> bytes:
        """Per-entry alpha, as written to the PNG ``tRNS`` chunk."""
        return bytes(entry[3] for entry in self.palette)

    def to_image(self) -> Image.Image:
        """Return a Pillow ``"P"`` image carrying the palette (without alpha)."""
        image = Image.frombytes("P", self.size, np.ascontiguousarray(self.indices).tobytes())
        image.putpalette([ch for entry in self.palette for ch in entry[:3]], rawmode="RGB")
        return image

    def colors(self) -> Sequence[RGBA]:
        """Palette entries actually referenced by at least one pixel."""
        used = np.unique(self.indices)
        return [self.palette[int(i)] for i in used]


def build_palette(color1: RGB, color2: RGB) -> Tuple[RGBA, ...]:
    return (TRANSPARENT, color1 + (255,), color2 + (255,))


def _premultiply(rgba: npt.NDArray[np.generic]) -> FloatArray:
    values = rgba.astype(np.float32)
    alpha = values[..., 3:4] / np.float32(255.0)
    values[..., :3] *= alpha
    return values


def nearest_indices(pixels: UInt8Array, palette: Sequence[RGBA]) -> UInt8Array:
    """Map ``(H, W, 4)`` RGBA pixels to the index of the closest palette entry."""
    if len(palette) > MAX_PALETTE_SIZE:
        raise ValueError(f"Palette has {len(palette)} entries, max {MAX_PALETTE_SIZE}")
    src = _premultiply(pixels)
    pal = _premultiply(np.asarray(palette, dtype=np.uint8))
    # (H, W, 1, 4) - (P, 4) -> (H, W, P)
    dist: FloatArray = np.square(src[..., None, :] - pal).sum(axis=-1)
    return dist.argmin(axis=-1).astype(np.uint8)


def quantize(canvas: Image.Image, color1: RGB, color2: RGB) -> PaletteImage:
    """Reduce an RGBA canvas to the ``[transparent, color1, color2]`` palette."""
    if canvas.mode != "RGBA":
        raise ValueError(f"Expected an RGBA canvas, got {canvas.mode}")
    palette = build_palette(color1, color2)
    pixels: UInt8Array = np.asarray(canvas, dtype=np.uint8)
    return PaletteImage(indices=nearest_indices(pixels, palette), palette=palette)
