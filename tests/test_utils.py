import csv
import os
from typing import Dict, List, Optional, Sequence, Tuple

from PIL import Image

from badge_forge.catalog import AssetCatalog, ColorRow, IconRow, build_catalog
from badge_forge.config import RenderConfig
from badge_forge.types import RGB, Affinity, Layer

CANVAS = 16

PRIMARY: Tuple[RGB, ...] = ((255, 0, 0), (0, 255, 0))
SECONDARY: Tuple[RGB, ...] = ((0, 0, 255), (255, 255, 0))


def solid_bitmap(
    size: Tuple[int, int],
    box: Optional[Tuple[int, int, int, int]] = None,
    color: Tuple[int, int, int, int] = (255, 255, 255, 255),
) -> Image.Image:
    """Transparent RGBA image with ``box`` (or everything) filled with ``color``."""
    img = Image.new("RGBA", size, (0, 0, 0, 0))
    img.paste(color, box or (0, 0, size[0], size[1]))
    return img


def make_config(**overrides: object) -> RenderConfig:
    values: Dict[str, object] = {"canvas_size": CANVAS, "workers": 2}
    values.update(overrides)
    return RenderConfig(**values)  # type: ignore[arg-type]


def make_catalog(
    primary: Sequence[RGB] = PRIMARY,
    secondary: Sequence[RGB] = SECONDARY,
    symbols: int = 1,
    borders: int = 1,
    with_outline: bool = True,
    config: Optional[RenderConfig] = None,
) -> AssetCatalog:
    """Catalog with primary colors first, then secondary; symbols, then borders.

    Symbols are a filled square in the middle, borders fill the canvas, and
    outlines are a one pixel frame.
    """
    config = config or make_config()
    size = config.canvas_size
    bitmaps: Dict[str, Image.Image] = {
        "symbol": solid_bitmap((size, size), (4, 4, size - 4, size - 4)),
        "border": solid_bitmap((size, size)),
        "outline": _frame(size),
    }
    color_rows = [ColorRow(*rgb, affinity=Affinity.PRIMARY) for rgb in primary] + [
        ColorRow(*rgb, affinity=Affinity.SECONDARY) for rgb in secondary
    ]
    icon_rows = [IconRow("symbol", "", Layer.SYMBOL) for _ in range(symbols)] + [
        IconRow("border", "outline" if with_outline else "", Layer.BORDER)
        for _ in range(borders)
    ]
    return build_catalog(color_rows, icon_rows, bitmaps.get, config)


def _frame(size: int) -> Image.Image:
    img = solid_bitmap((size, size))
    img.paste((0, 0, 0, 0), (1, 1, size - 1, size - 1))
    return img


def write_asset_root(
    root: str,
    colors: Sequence[Tuple[int, int, int, int]],
    icons: Sequence[Tuple[str, str, int]],
    bitmaps: Optional[Dict[str, Image.Image]] = None,
) -> str:
    """Lay out ``csv/`` tables and PNG bitmaps the way ``load_catalog`` expects.

    ``colors`` rows are ``(r, g, b, layer)`` and ``icons`` rows are
    ``(icon, outline, layer)``.
    """
    os.makedirs(os.path.join(root, "csv"), exist_ok=True)
    os.makedirs(os.path.join(root, "icons"), exist_ok=True)
    with open(os.path.join(root, "csv", "badge_colors.csv"), "w", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(["name", "R", "G", "B", "layer"])
        for i, (r, g, b, layer) in enumerate(colors):
            writer.writerow([f"color{i}", r, g, b, layer])
    with open(os.path.join(root, "csv", "badge_icons.csv"), "w", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(["name", "icon", "outline", "layer"])
        for i, (icon, outline, layer) in enumerate(icons):
            writer.writerow([f"icon{i}", icon, outline, layer])
    for name, img in (bitmaps or {}).items():
        img.save(os.path.join(root, "icons", name), format="PNG")
    return root


def png_names(directory: str) -> List[str]:
    return sorted(n for n in os.listdir(directory) if n.endswith(".png"))


def used_colors(path: str) -> List[Tuple[int, int, int, int]]:
    """Distinct RGBA values of a PNG file, decoded through its palette."""
    with Image.open(path) as img:
        rgba = img.convert("RGBA")
    colors = rgba.getcolors(maxcolors=1 << 16) or []
    return sorted(color for _, color in colors)
