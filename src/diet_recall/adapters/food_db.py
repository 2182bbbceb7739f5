"""Food composition table loader."""

from pathlib import Path

import pandas as pd
from pydantic import BaseModel, Field, ValidationError

from diet_recall.adapters.frames import read_delimited, to_python
from diet_recall.domain.recall import FoodReference, ReferenceTable


class FoodDbRow(BaseModel):
    """Validated composition row."""

    food_id: int
    energy_per_100g: float | None = Field(default=None, ge=0)
    processing_tier: int | None = Field(default=None, ge=1, le=4)
    food_name: str | None = None


def load_reference_table(
    path: Path | str,
    *,
    id_column: str = "id",
    energy_column: str = "energy",
    tier_column: str = "NOVA",
    name_column: str = "food_name",
) -> ReferenceTable:
    """Load a composition table from CSV or Excel into a ReferenceTable.

    The name column is optional; the id, energy and NOVA columns are not.
    Blank energy or NOVA cells become None.
    """
    file_path = Path(path)
    if file_path.suffix.lower() == ".csv":
        frame = read_delimited(file_path)
    else:
        frame = pd.read_excel(file_path, sheet_name=0)

    columns = {
        id_column: "food_id",
        energy_column: "energy_per_100g",
        tier_column: "processing_tier",
    }
    missing = [column for column in columns if column not in frame.columns]
    if missing:
        raise ValueError(
            f"{file_path.name} is missing food table columns: {', '.join(missing)}"
        )
    if name_column in frame.columns:
        columns[name_column] = "food_name"

    table = frame[list(columns)].rename(columns=columns)
    foods = []
    for row in table.to_dict(orient="records"):
        payload = {key: to_python(value) for key, value in row.items()}
        if payload.get("food_name") is not None:
            payload["food_name"] = str(payload["food_name"])
        try:
            parsed = FoodDbRow.model_validate(payload)
        except ValidationError as exc:
            raise ValueError(f"{file_path.name}: invalid food row {payload}") from exc
        foods.append(FoodReference(**parsed.model_dump()))
    return ReferenceTable(foods)
