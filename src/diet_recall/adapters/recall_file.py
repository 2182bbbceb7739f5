"""Reader for 24-hour recall exports (Metabol layout).

Row 1 holds the participant metadata labels and row 2 their values. The intake
table header sits on row 3 with one food item per row after it.
"""

import logging
from pathlib import Path

import pandas as pd
from pydantic import BaseModel, Field, ValidationError

from diet_recall.adapters.frames import read_delimited, to_python
from diet_recall.domain.errors import RecallFormatError, UnsupportedFormatError
from diet_recall.domain.recall import (
    HEADER_COLUMNS,
    IntakeRecord,
    ParticipantHeader,
    RecallData,
)

SUPPORTED_EXTENSIONS = (".xls", ".xlsx", ".csv")

RECALL_COLUMNS = {
    "Cód. Alimento": "food_id",
    "Alimento": "food_name",
    "Cantidad (g)": "serving_g",
    "Comida": "meal",
    "Día": "day",
}

_EXCEL_ENGINES = {".xls": "xlrd", ".xlsx": "openpyxl"}

_logger = logging.getLogger(__name__)


class RecallRow(BaseModel):
    """One row of the intake table after column renaming."""

    food_id: int
    food_name: str | None = None
    serving_g: float = Field(ge=0)
    meal: str = Field(min_length=1)
    day: int

    def to_record(self) -> IntakeRecord:
        return IntakeRecord(
            day=self.day,
            meal=self.meal,
            food_id=self.food_id,
            serving_grams=self.serving_g,
            food_name=self.food_name,
        )


def load_recall(path: Path | str) -> RecallData:
    """Read participant metadata and intake records from a recall file."""
    file_path = Path(path)
    extension = file_path.suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported recall file format: {file_path.name}"
        )

    header_frame = _read_table(file_path, extension, 0, nrows=1)
    data_frame = _read_table(file_path, extension, 2, skiprows=2)

    header = _parse_header(header_frame)
    records = _parse_records(data_frame, file_path)
    _logger.debug("Loaded %s records from %s", len(records), file_path.name)
    return RecallData(header=header, records=records)


def _read_table(
    path: Path, extension: str, header_line: int, **kwargs: object
) -> pd.DataFrame:
    if extension == ".csv":
        return read_delimited(path, header_line, **kwargs)
    return pd.read_excel(
        path, sheet_name=0, engine=_EXCEL_ENGINES[extension], **kwargs
    )


def _parse_header(frame: pd.DataFrame) -> ParticipantHeader:
    values = []
    if len(frame):
        values = [to_python(value) for value in frame.iloc[0].tolist()]
    values = (values + [None] * len(HEADER_COLUMNS))[: len(HEADER_COLUMNS)]
    return ParticipantHeader(**dict(zip(HEADER_COLUMNS, values, strict=True)))


def _parse_records(frame: pd.DataFrame, path: Path) -> list[IntakeRecord]:
    frame = frame.rename(columns=lambda name: str(name).strip())
    missing = [column for column in RECALL_COLUMNS if column not in frame.columns]
    if missing:
        raise RecallFormatError(
            f"{path.name} is missing recall columns: {', '.join(missing)}"
        )

    table = frame[list(RECALL_COLUMNS)].rename(columns=RECALL_COLUMNS)
    table["food_id"] = pd.to_numeric(table["food_id"], errors="coerce")
    table = table[table["food_id"].notna()]

    records = []
    for position, row in enumerate(table.to_dict(orient="records")):
        payload = {key: to_python(value) for key, value in row.items()}
        if payload["food_name"] is not None:
            payload["food_name"] = str(payload["food_name"])
        try:
            records.append(RecallRow.model_validate(payload).to_record())
        except ValidationError as exc:
            raise RecallFormatError(
                f"{path.name}: invalid recall row {position + 1}: {exc}"
            ) from exc
    return records
