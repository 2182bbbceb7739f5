"""Command line entrypoint for batch recall processing."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from diet_recall.adapters.food_db import load_reference_table
from diet_recall.app_logging import configure_logging
from diet_recall.config import Settings
from diet_recall.domain.errors import NoRecallFilesError
from diet_recall.services.aggregator import DietAggregator
from diet_recall.services.batch import BatchProcessor, write_results

_logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the diet-recall command."""
    parser = argparse.ArgumentParser(
        prog="diet-recall",
        description=(
            "Summarize 24-hour dietary recall files into one row per participant "
            "with energy by meal and NOVA group."
        ),
    )
    parser.add_argument("folder", type=Path, help="Folder searched for recall files")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--output", type=Path, help="CSV file for the results")
    output.add_argument(
        "--no-output", action="store_true", help="Skip writing the results CSV"
    )
    parser.add_argument(
        "--format",
        dest="csv_format",
        choices=("euro", "us"),
        help="euro: ';' separator and ',' decimal; us: ',' and '.'",
    )
    parser.add_argument("--food-db", type=Path, help="Food composition table")
    parser.add_argument("--workers", type=int, help="Files processed in parallel")
    parser.add_argument(
        "--no-progress", action="store_true", help="Hide the progress bar"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run a batch over a folder and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides: dict[str, object] = {}
    if args.food_db is not None:
        overrides["food_db_path"] = args.food_db
    if args.output is not None:
        overrides["output_csv"] = args.output
    if args.no_output:
        overrides["output_csv"] = None
    if args.csv_format is not None:
        overrides["csv_format"] = args.csv_format
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.no_progress:
        overrides["show_progress"] = False

    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        parser.error(f"invalid settings: {exc}")

    configure_logging(settings.log_level)
    _logger.info("Starting diet-recall (environment=%s)", settings.environment)
    try:
        reference_table = load_reference_table(settings.food_db_path)
    except (OSError, ValueError) as exc:
        _logger.error(
            "Could not load food database %s: %s", settings.food_db_path, exc
        )
        return 1
    _logger.info("Loaded %s foods from %s", len(reference_table), settings.food_db_path)

    processor = BatchProcessor(
        aggregator=DietAggregator(reference_table),
        max_workers=settings.max_workers,
        show_progress=settings.show_progress,
    )
    try:
        results = processor.run(args.folder)
    except NoRecallFilesError as exc:
        _logger.error("%s", exc)
        return 1

    if settings.output_csv is not None:
        write_results(results, settings.output_csv, settings.csv_format)
    return 0


if __name__ == "__main__":
    sys.exit(main())
