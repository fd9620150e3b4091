"""Command line entry point.

Batch mode (no positional argument) renders every combination into
``--output``. Single-job mode takes ``S_B_C1_C2`` and writes one badge to
``--single-output``.

Exit codes: 0 success (including an empty combination space), 1 catalog or
write failure, 2 usage error, 130 interrupted.
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from badge_forge.catalog import AssetCatalog
from badge_forge.config import RenderConfig
from badge_forge.errors import CatalogError, EncodeError, JobSpecError
from badge_forge.job import JOB_SPEC_USAGE, parse_job_spec
from badge_forge.progress import TqdmProgress
from badge_forge.scheduler import Scheduler, count_jobs, render_single
from badge_forge.sources.loader import load_catalog

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    defaults = RenderConfig()
    parser = argparse.ArgumentParser(
        prog="badge-forge",
        description="Render every symbol/border/color badge combination as indexed PNGs.",
    )
    parser.add_argument(
        "job",
        nargs="?",
        metavar="JOB_SPEC",
        help=f"Render a single badge instead of the full set: {JOB_SPEC_USAGE}",
    )
    parser.add_argument("--assets", default=defaults.asset_root, help="Asset root directory.")
    parser.add_argument("--output", default=defaults.output_dir, help="Batch output directory.")
    parser.add_argument(
        "--single-output",
        default=defaults.single_output,
        help="Output file for single-job mode.",
    )
    parser.add_argument("--workers", type=int, default=defaults.workers, help="Worker threads.")
    parser.add_argument(
        "--queue-factor",
        type=int,
        default=defaults.queue_factor,
        help="Job queue capacity as a multiple of --workers.",
    )
    parser.add_argument(
        "--progress-every",
        type=int,
        default=defaults.progress_every,
        help="Refresh progress every N completed jobs.",
    )
    parser.add_argument(
        "--canvas-size", type=int, default=defaults.canvas_size, help="Badge edge length in pixels."
    )
    parser.add_argument(
        "--symbol-scale",
        type=float,
        default=defaults.symbol_scale,
        help="Scale of the symbol relative to its source bitmap, in (0, 1].",
    )
    parser.add_argument(
        "--border-scale",
        type=float,
        default=defaults.border_scale,
        help="Scale of the border and its outline, in (0, 1].",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def config_from_args(args: argparse.Namespace) -> RenderConfig:
    return replace(
        RenderConfig(),
        asset_root=args.assets,
        output_dir=args.output,
        single_output=args.single_output,
        workers=args.workers,
        queue_factor=args.queue_factor,
        progress_every=args.progress_every,
        canvas_size=args.canvas_size,
        symbol_scale=args.symbol_scale,
        border_scale=args.border_scale,
    )


def run_single(catalog: AssetCatalog, spec: str, config: RenderConfig) -> int:
    try:
        job = parse_job_spec(spec, catalog)
    except JobSpecError as exc:
        print(f"Usage: badge-forge {JOB_SPEC_USAGE}", file=sys.stderr)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    try:
        render_single(catalog, job, config.single_output, config)
    except EncodeError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE
    print(f"Generated {config.single_output}")
    return EXIT_OK


def run_batch(catalog: AssetCatalog, config: RenderConfig, show_progress: bool = True) -> int:
    total = count_jobs(catalog)
    logger.info("Total combinations: %d", total)
    if total == 0:
        return EXIT_OK

    with TqdmProgress(total, disable=not show_progress) as progress:
        scheduler = Scheduler(catalog, config, progress=progress)
        try:
            summary = scheduler.run()
        except OSError as exc:
            logger.error("Cannot prepare output directory %s: %s", config.output_dir, exc)
            return EXIT_FAILURE
        except KeyboardInterrupt:
            scheduler.cancel()
            return EXIT_INTERRUPTED

    if summary.cancelled:
        return EXIT_INTERRUPTED
    if summary.failed:
        logger.error("%d of %d badges could not be written", summary.failed, summary.total)
        return EXIT_FAILURE
    logger.info("Generation complete, saved to %s", config.output_dir)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        catalog = load_catalog(config)
    except CatalogError as exc:
        logger.error("Cannot load catalog: %s", exc)
        return EXIT_FAILURE

    if args.job is not None:
        return run_single(catalog, args.job, config)
    return run_batch(catalog, config, show_progress=not args.no_progress)


if __name__ == "__main__":
    sys.exit(main())
