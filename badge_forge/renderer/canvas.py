"""Pooled RGBA canvases.

Workers borrow full-size RGBA buffers instead of allocating two fresh images
per job. :meth:`CanvasPool.acquire` is a context manager: the buffer is cleared
on checkout and returned to the free list on every exit path, including
exceptions. A checked-out buffer is owned by exactly one job.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, List

from PIL import Image

from badge_forge.types import TRANSPARENT


def clear_canvas(canvas: Image.Image) -> None:
    """Reset every pixel to fully transparent black."""
    canvas.paste(TRANSPARENT, (0, 0, canvas.width, canvas.height))


class CanvasPool:
    """Free list of square RGBA canvases.

    The pool only ever holds as many buffers as were checked out at once, which
    in a batch run is two per worker thread, so the free list is left unbounded.
    """

    size: int

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"Canvas size must be positive, got {size}")
        self.size = size
        self._free: List[Image.Image] = []
        self._lock = threading.Lock()
        self._created = 0

    @property
    def created(self) -> int:
        """Total buffers allocated over the pool's lifetime."""
        with self._lock:
            return self._created

    @property
    def idle(self) -> int:
        with self._lock:
            return len(self._free)

    def _checkout(self) -> Image.Image:
        with self._lock:
            if self._free:
                return self._free.pop()
            self._created += 1
        return Image.new("RGBA", (self.size, self.size), TRANSPARENT)

    def _release(self, canvas: Image.Image) -> None:
        with self._lock:
            self._free.append(canvas)

    @contextmanager
    def acquire(self) -> Iterator[Image.Image]:
        """Borrow a cleared canvas for the duration of the ``with`` block."""
        canvas = self._checkout()
        try:
            clear_canvas(canvas)
            yield canvas
        finally:
            self._release(canvas)
