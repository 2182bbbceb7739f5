"""Batch processing of a folder of recall files into one wide table."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import pandas as pd
from tqdm import tqdm

from diet_recall.adapters.recall_file import SUPPORTED_EXTENSIONS, load_recall
from diet_recall.domain.errors import NoRecallFilesError
from diet_recall.domain.recall import HEADER_COLUMNS, RecallData
from diet_recall.domain.summary import SUMMARY_COLUMNS
from diet_recall.services.aggregator import DietAggregator

STATUS_SUCCESS = "Success"
STATUS_SKIPPED = "Skipped"
STATUS_FAILED = "Failed"

AUDIT_COLUMNS: tuple[str, ...] = (
    "source_file",
    "processing_status",
    "error_message",
    "missing_foods",
    "missing_nova",
)
RESULT_COLUMNS: tuple[str, ...] = AUDIT_COLUMNS + HEADER_COLUMNS + SUMMARY_COLUMNS

_CSV_FORMATS = {
    "euro": (";", ","),
    "us": (",", "."),
}

_logger = logging.getLogger(__name__)


class RecallLoader(Protocol):
    """Callable that parses one recall file."""

    def __call__(self, path: Path) -> RecallData:
        """Return the header and records stored in the file."""


def discover_recall_files(folder: Path | str) -> list[Path]:
    """Return recall files under a folder, searched recursively."""
    root = Path(folder)
    files = sorted(
        path
        for path in root.rglob("*")
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    )
    if not files:
        raise NoRecallFilesError(
            f"No compatible files (.xls, .xlsx, .csv) found in {root}"
        )
    return files


@dataclass
class BatchProcessor:
    """Runs loader and aggregator over many files, one row per file."""

    aggregator: DietAggregator
    loader: RecallLoader = load_recall
    max_workers: int = 1
    show_progress: bool = True

    def run(self, folder: Path | str) -> pd.DataFrame:
        """Process every recall file in a folder.

        A file that cannot be read or aggregated becomes a Failed row; the
        batch itself only raises when the folder holds no recall files.
        """
        root = Path(folder)
        files = discover_recall_files(root)
        _logger.info("Found %s files. Starting batch processing...", len(files))

        sources = [path.relative_to(root).as_posix() for path in files]
        rows = self._process_all(files, sources)
        frame = pd.DataFrame(rows, columns=list(RESULT_COLUMNS))

        statuses = frame["processing_status"]
        _logger.info(
            "Batch complete. Total: %s | Success: %s | Skipped: %s | Failed: %s",
            len(files),
            int((statuses == STATUS_SUCCESS).sum()),
            int((statuses == STATUS_SKIPPED).sum()),
            int((statuses == STATUS_FAILED).sum()),
        )
        return frame

    def process_file(
        self, path: Path, source: str | None = None
    ) -> dict[str, object]:
        """Return the result row for a single recall file."""
        source_file = source or path.name
        try:
            recall = self.loader(path)
            if not recall.records:
                return _status_row(
                    source_file, STATUS_SKIPPED, "File contained no food records"
                )
            summary, warnings = self.aggregator.aggregate(recall.records)
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Failed to process %s: %s", source_file, exc)
            message = " ".join(str(exc).splitlines()) or type(exc).__name__
            return _status_row(source_file, STATUS_FAILED, message)

        return {
            "source_file": source_file,
            "processing_status": STATUS_SUCCESS,
            "error_message": None,
            "missing_foods": _join_ids(warnings.unmatched_food_ids),
            "missing_nova": _join_ids(warnings.tier_missing_food_ids),
            **recall.header.as_row(),
            **summary.as_row(),
        }

    def _process_all(
        self, files: list[Path], sources: list[str]
    ) -> list[dict[str, object]]:
        with tqdm(
            total=len(files), unit="file", disable=not self.show_progress
        ) as progress:
            if self.max_workers <= 1:
                rows = []
                for path, source in zip(files, sources, strict=True):
                    rows.append(self.process_file(path, source))
                    progress.update()
                return rows

            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = [
                    pool.submit(self.process_file, path, source)
                    for path, source in zip(files, sources, strict=True)
                ]
                for _ in as_completed(futures):
                    progress.update()
                return [future.result() for future in futures]


def write_results(
    frame: pd.DataFrame, path: Path | str, csv_format: str = "euro"
) -> None:
    """Write the batch table as CSV in European or US number format."""
    if csv_format not in _CSV_FORMATS:
        raise ValueError(f"Unknown CSV format: {csv_format!r} (use 'euro' or 'us')")
    sep, decimal = _CSV_FORMATS[csv_format]
    frame.to_csv(path, sep=sep, decimal=decimal, index=False)
    _logger.info("Results saved to: %s (%s format)", path, csv_format)


def _status_row(source_file: str, status: str, message: str) -> dict[str, object]:
    return {
        "source_file": source_file,
        "processing_status": status,
        "error_message": message,
    }


def _join_ids(food_ids: frozenset[int]) -> str:
    return " _ ".join(str(food_id) for food_id in sorted(food_ids))
