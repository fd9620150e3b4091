"""Render configuration.

All tunables live on the frozen :class:`RenderConfig`. Defaults mirror the
``DEFAULT_*`` module constants so callers can reference them individually.
"""

import os
from dataclasses import dataclass, field

DEFAULT_CANVAS_SIZE = 300
DEFAULT_SYMBOL_SCALE = 0.7
DEFAULT_BORDER_SCALE = 1.0
DEFAULT_OUTPUT_DIR = "images"
DEFAULT_SINGLE_OUTPUT = "badge.png"
DEFAULT_ASSET_ROOT = "assets"
DEFAULT_QUEUE_FACTOR = 2
DEFAULT_PROGRESS_EVERY = 100
DEFAULT_COMPRESS_LEVEL = 9


def default_worker_count() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class RenderConfig:
    """Settings shared by the catalog builder, renderer and scheduler.

    Attributes:
        canvas_size: Edge length in pixels of every mask, canvas and output.
        symbol_scale: Scale applied to symbol icons, in ``(0, 1]``.
        border_scale: Scale applied to border icons and outlines, in ``(0, 1]``.
        asset_root: Directory holding ``csv/`` tables and icon bitmaps.
        output_dir: Batch mode destination directory.
        single_output: Fixed filename used by single-job mode.
        workers: Number of worker threads.
        queue_factor: Job queue capacity as a multiple of ``workers``.
        progress_every: Report progress every N completed jobs.
        compress_level: zlib level used by the PNG encoder (0-9).
    """

    canvas_size: int = DEFAULT_CANVAS_SIZE
    symbol_scale: float = DEFAULT_SYMBOL_SCALE
    border_scale: float = DEFAULT_BORDER_SCALE
    asset_root: str = DEFAULT_ASSET_ROOT
    output_dir: str = DEFAULT_OUTPUT_DIR
    single_output: str = DEFAULT_SINGLE_OUTPUT
    workers: int = field(default_factory=default_worker_count)
    queue_factor: int = DEFAULT_QUEUE_FACTOR
    progress_every: int = DEFAULT_PROGRESS_EVERY
    compress_level: int = DEFAULT_COMPRESS_LEVEL

    def __post_init__(self) -> None:
        if self.canvas_size <= 0:
            raise ValueError(f"canvas_size must be positive, got {self.canvas_size}")
        for name in ("symbol_scale", "border_scale"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.queue_factor < 1:
            raise ValueError(
                f"queue_factor must be at least 1, got {self.queue_factor}"
            )
        if self.progress_every < 1:
            raise ValueError(
                f"progress_every must be at least 1, got {self.progress_every}"
            )
        if not 0 <= self.compress_level <= 9:
            raise ValueError(
                f"compress_level must be in [0, 9], got {self.compress_level}"
            )

    @property
    def queue_size(self) -> int:
        return self.workers * self.queue_factor
