"""Helpers for reading delimited tables and plain Python cell values."""

from itertools import islice
from pathlib import Path

import pandas as pd

_DELIMITERS = (",", ";", "\t")


def read_delimited(path: Path, header_line: int = 0, **kwargs: object) -> pd.DataFrame:
    """Read a CSV whose separator is guessed from its header line.

    Semicolon files are European exports and use a decimal comma.
    """
    sep = _guess_delimiter(path, header_line)
    decimal = "," if sep == ";" else "."
    return pd.read_csv(path, sep=sep, decimal=decimal, engine="python", **kwargs)


def _guess_delimiter(path: Path, line_index: int) -> str:
    with path.open(encoding="utf-8", errors="replace") as handle:
        line = next(islice(handle, line_index, None), "")
    counts = {delimiter: line.count(delimiter) for delimiter in _DELIMITERS}
    best = max(_DELIMITERS, key=lambda delimiter: counts[delimiter])
    return best if counts[best] else ","


def to_python(value: object) -> object | None:
    """Convert pandas missing markers and numpy scalars to plain Python."""
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    if hasattr(value, "item"):
        return value.item()
    return value
