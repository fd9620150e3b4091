"""Progress display for batch runs."""

import threading
from types import TracebackType
from typing import Optional, Type

from tqdm import tqdm


class TqdmProgress:
    """Scheduler progress callback drawing a ``tqdm`` bar.

    The scheduler reports absolute completion counts from several threads and
    not necessarily in order; the bar only ever moves forward.
    """

    def __init__(self, total: int, desc: str = "Rendering", disable: Optional[bool] = None):
        self._bar = tqdm(total=total, desc=desc, unit="badge", disable=disable)
        self._lock = threading.Lock()

    def __call__(self, completed: int, total: int) -> None:
        with self._lock:
            if completed > self._bar.n:
                self._bar.update(completed - self._bar.n)

    def close(self) -> None:
        self._bar.close()

    def __enter__(self) -> "TqdmProgress":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()
