"""Per-job render pipeline: canvas pool -> compositor -> quantizer -> encoder."""

from pathlib import Path
from typing import Optional

from badge_forge.catalog import AssetCatalog
from badge_forge.config import RenderConfig
from badge_forge.job import RenderJob
from badge_forge.renderer.canvas import CanvasPool
from badge_forge.renderer.compositor import badge_layers, composite
from badge_forge.renderer.encoder import PathLike, write_png
from badge_forge.renderer.quantize import PaletteImage, quantize


def render_badge(
    catalog: AssetCatalog, job: RenderJob, pool: CanvasPool
) -> PaletteImage:
    """Composite and quantize one badge using buffers borrowed from ``pool``."""
    if pool.size != catalog.canvas_size:
        raise ValueError(
            f"Pool canvas size {pool.size} != catalog canvas size {catalog.canvas_size}"
        )
    layers = badge_layers(catalog, job)
    with pool.acquire() as canvas, pool.acquire() as scratch:
        composite(canvas, layers, scratch)
        return quantize(
            canvas,
            catalog.color(job.color1_index).rgb,
            catalog.color(job.color2_index).rgb,
        )


class BadgeRenderer:
    """Renders and writes badges for one catalog.

    Thread-safe: the catalog is read-only and each call borrows its own
    buffers from the shared pool.
    """

    catalog: AssetCatalog
    pool: CanvasPool
    compress_level: int

    def __init__(
        self,
        catalog: AssetCatalog,
        config: Optional[RenderConfig] = None,
        pool: Optional[CanvasPool] = None,
    ):
        config = config or RenderConfig(canvas_size=catalog.canvas_size)
        self.catalog = catalog
        self.pool = pool or CanvasPool(catalog.canvas_size)
        self.compress_level = config.compress_level

    def render(self, job: RenderJob) -> PaletteImage:
        return render_badge(self.catalog, job, self.pool)

    def write(self, job: RenderJob, path: PathLike) -> Path:
        """Render ``job`` and encode it to ``path``.

        Raises:
            EncodeError: If the file cannot be written.
        """
        return write_png(self.render(job), path, self.compress_level)
