"""Batch scheduler: enumerate every badge and render it on a worker pool.

Lifecycle (:class:`SchedulerState`)::

    IDLE -> ENUMERATING -> DRAINING -> DONE

* **Enumerating**: the calling thread walks the combination space
  primary color x secondary color x symbol icon x border icon. Outputs
  already present in the output directory are counted and skipped; all other
  jobs are put on a bounded queue. A full queue blocks the producer, so at most
  ``workers * queue_factor`` jobs are ever buffered.
* **Draining**: one stop marker per worker is queued and the producer joins
  the pool. A Ctrl-C at this point cancels the run but still waits for every
  worker.
* **Done**: every worker has exited.

Workers each render one job at a time with buffers borrowed from a shared
:class:`~badge_forge.renderer.canvas.CanvasPool`. A failed write is logged and
counted without disturbing other jobs. :meth:`Scheduler.cancel` stops the
producer and makes workers discard whatever is still queued once their current
job is finished; since files are renamed into place atomically, an interrupted
run leaves no partial outputs and a re-run resumes where it stopped.
"""

import itertools
import logging
import os
import queue
import threading
from dataclasses import dataclass
from enum import StrEnum, auto
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from pyrsistent import pset
from pyrsistent.typing import PSet

from badge_forge.catalog import AssetCatalog
from badge_forge.config import RenderConfig
from badge_forge.errors import EncodeError
from badge_forge.job import RenderJob
from badge_forge.renderer.badge import BadgeRenderer
from badge_forge.renderer.encoder import PathLike

logger = logging.getLogger(__name__)

ProgressFn = Callable[[int, int], None]

# Producer wakes up this often while blocked on a full queue to check for cancellation.
PUT_TIMEOUT_SECONDS = 0.1


class SchedulerState(StrEnum):
    IDLE = auto()
    ENUMERATING = auto()
    DRAINING = auto()
    DONE = auto()


class AtomicCounter:
    """Integer counter safe to bump from many threads."""

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """Add ``amount`` and return the new value."""
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass(frozen=True)
class RunSummary:
    """Outcome of one batch run.

    Attributes:
        total: Size of the combination space.
        rendered: Jobs written successfully this run.
        skipped: Jobs whose output already existed.
        failed: Jobs whose output could not be written.
        cancelled: True if the run was cancelled before covering every job.
    """

    total: int
    rendered: int
    skipped: int
    failed: int
    cancelled: bool = False

    @property
    def completed(self) -> int:
        return self.rendered + self.skipped + self.failed


def count_jobs(catalog: AssetCatalog) -> int:
    """Size of the combination space; zero if any factor is empty."""
    return (
        len(catalog.symbol_icons())
        * len(catalog.border_icons())
        * len(catalog.primary_colors())
        * len(catalog.secondary_colors())
    )


def enumerate_jobs(catalog: AssetCatalog) -> Iterator[RenderJob]:
    """Yield every valid job, color pairs outermost and border icons innermost."""
    for color1, color2, symbol, border in itertools.product(
        catalog.primary_colors(),
        catalog.secondary_colors(),
        catalog.symbol_icons(),
        catalog.border_icons(),
    ):
        yield RenderJob(
            symbol_index=symbol.index,
            border_index=border.index,
            color1_index=color1.index,
            color2_index=color2.index,
        )


def scan_existing_outputs(output_dir: Union[str, Path]) -> PSet[str]:
    """Names of ``.png`` files already present in ``output_dir``.

    A missing directory simply has no outputs.
    """
    try:
        with os.scandir(output_dir) as entries:
            names = [e.name for e in entries if e.is_file() and e.name.endswith(".png")]
    except FileNotFoundError:
        return pset()
    return pset(names)


class _Stop:
    """Queue marker telling one worker to exit."""


_STOP = _Stop()

QueueItem = Union[RenderJob, _Stop]


class Scheduler:
    """Renders the whole combination space of a catalog into ``output_dir``.

    A scheduler runs once; create a new one for another pass.
    """

    catalog: AssetCatalog
    config: RenderConfig
    renderer: BadgeRenderer
    output_dir: Path

    def __init__(
        self,
        catalog: AssetCatalog,
        config: RenderConfig,
        renderer: Optional[BadgeRenderer] = None,
        progress: Optional[ProgressFn] = None,
        existing: Optional[PSet[str]] = None,
    ):
        self.catalog = catalog
        self.config = config
        self.renderer = renderer or BadgeRenderer(catalog, config)
        self.output_dir = Path(config.output_dir)
        self._progress = progress
        self._existing = existing
        self._state = SchedulerState.IDLE
        self._state_lock = threading.Lock()
        self._cancel = threading.Event()
        self._completed = AtomicCounter()
        self._rendered = AtomicCounter()
        self._skipped = AtomicCounter()
        self._failed = AtomicCounter()
        self._total = 0

    @property
    def state(self) -> SchedulerState:
        with self._state_lock:
            return self._state

    def _set_state(self, state: SchedulerState) -> None:
        with self._state_lock:
            self._state = state
        logger.debug("Scheduler state -> %s", state)

    @property
    def completed(self) -> int:
        """Jobs accounted for so far (rendered, skipped or failed)."""
        return self._completed.value

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Stop enumerating; workers finish their current job and exit."""
        if not self._cancel.is_set():
            logger.info("Cancellation requested")
        self._cancel.set()

    def run(self) -> RunSummary:
        """Render every job not already present and block until done.

        Raises:
            RuntimeError: If this scheduler has already been run.
        """
        with self._state_lock:
            if self._state != SchedulerState.IDLE:
                raise RuntimeError(f"Scheduler already ran (state={self._state})")
            self._state = SchedulerState.ENUMERATING

        self._total = count_jobs(self.catalog)
        if self._total == 0:
            logger.info("Combination space is empty; nothing to render")
            self._set_state(SchedulerState.DONE)
            return self._summary()

        self.output_dir.mkdir(parents=True, exist_ok=True)
        existing = self._existing
        if existing is None:
            existing = scan_existing_outputs(self.output_dir)
        logger.info(
            "Rendering %d combinations (%d outputs already present) with %d workers",
            self._total,
            len(existing),
            self.config.workers,
        )

        jobs: "queue.Queue[QueueItem]" = queue.Queue(maxsize=self.config.queue_size)
        workers = self._start_workers(jobs)
        try:
            self._produce(jobs, existing)
        except KeyboardInterrupt:
            logger.warning("Interrupted; waiting for in-flight jobs")
            self.cancel()
        finally:
            self._drain(jobs, workers)

        summary = self._summary()
        logger.info(
            "Run finished: rendered=%d skipped=%d failed=%d cancelled=%s",
            summary.rendered,
            summary.skipped,
            summary.failed,
            summary.cancelled,
        )
        return summary

    def _summary(self) -> RunSummary:
        return RunSummary(
            total=self._total,
            rendered=self._rendered.value,
            skipped=self._skipped.value,
            failed=self._failed.value,
            cancelled=self.cancelled,
        )

    def _start_workers(self, jobs: "queue.Queue[QueueItem]") -> List[threading.Thread]:
        workers = [
            threading.Thread(
                target=self._work, args=(jobs,), name=f"badge-worker-{i}", daemon=True
            )
            for i in range(self.config.workers)
        ]
        for worker in workers:
            worker.start()
        return workers

    def _drain(
        self, jobs: "queue.Queue[QueueItem]", workers: List[threading.Thread]
    ) -> None:
        """Stop every worker and wait for it; an interrupt here only cancels."""
        self._set_state(SchedulerState.DRAINING)
        stops = len(workers)
        pending = list(workers)
        while stops or pending:
            try:
                while stops:
                    jobs.put(_STOP)
                    stops -= 1
                while pending:
                    pending[0].join()
                    pending.pop(0)
            except KeyboardInterrupt:
                logger.warning("Interrupted while draining; waiting for in-flight jobs")
                self.cancel()
        self._set_state(SchedulerState.DONE)

    def _produce(self, jobs: "queue.Queue[QueueItem]", existing: PSet[str]) -> None:
        for job in enumerate_jobs(self.catalog):
            if self._cancel.is_set():
                return
            if job.filename in existing:
                self._skipped.increment()
                self._advance()
                continue
            if not self._put(jobs, job):
                return

    def _put(self, jobs: "queue.Queue[QueueItem]", job: RenderJob) -> bool:
        while not self._cancel.is_set():
            try:
                jobs.put(job, timeout=PUT_TIMEOUT_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def _work(self, jobs: "queue.Queue[QueueItem]") -> None:
        while True:
            item = jobs.get()
            try:
                if isinstance(item, _Stop):
                    return
                if self._cancel.is_set():
                    continue
                self._process(item)
            finally:
                jobs.task_done()

    def _process(self, job: RenderJob) -> None:
        path = self.output_dir / job.filename
        try:
            self.renderer.write(job, path)
        except EncodeError as exc:
            logger.warning("Skipping %s: %s", job.filename, exc)
            self._failed.increment()
        except Exception:
            logger.exception("Rendering %s failed", job.filename)
            self._failed.increment()
        else:
            self._rendered.increment()
        self._advance()

    def _advance(self) -> None:
        done = self._completed.increment()
        if self._progress is not None and (
            done % self.config.progress_every == 0 or done == self._total
        ):
            self._progress(done, self._total)


def render_single(
    catalog: AssetCatalog,
    job: RenderJob,
    path: PathLike,
    config: Optional[RenderConfig] = None,
) -> Path:
    """Render one job synchronously to a fixed ``path``.

    No enumeration, queue or skip check is involved; an existing file at
    ``path`` is overwritten.

    Raises:
        EncodeError: If the file cannot be written.
    """
    renderer = BadgeRenderer(catalog, config)
    written = renderer.write(job, path)
    logger.info("Rendered %s to %s", job.filename, written)
    return written
