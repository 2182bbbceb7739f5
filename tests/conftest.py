"""Shared test fixtures."""

import csv
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest
from openpyxl import Workbook

from diet_recall.domain.recall import FoodReference, IntakeRecord, ReferenceTable

HEADER_LABELS = ["Código", "Nombre", "Apellidos", "Sexo", "Edad", "GER estimado"]
DATA_HEADER = ["Cód. Alimento", "Alimento", "Cantidad (g)", "Comida", "Día"]

APPLE = 1
CRISPS = 2
NO_NOVA = 3
NO_ENERGY = 4


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("diet_recall")
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def reference_table() -> ReferenceTable:
    return ReferenceTable(
        [
            FoodReference(APPLE, energy_per_100g=100, processing_tier=1),
            FoodReference(CRISPS, energy_per_100g=250, processing_tier=4),
            FoodReference(NO_NOVA, energy_per_100g=50, processing_tier=None),
            FoodReference(NO_ENERGY, energy_per_100g=None, processing_tier=2),
        ]
    )


def record(day: int, meal: str, food_id: int, grams: float) -> IntakeRecord:
    """Build an intake record with positional shorthand."""
    return IntakeRecord(day=day, meal=meal, food_id=food_id, serving_grams=grams)


def write_recall_xlsx(
    path: Path,
    header_values: Sequence[object],
    rows: Sequence[Sequence[object]],
) -> Path:
    """Write a recall workbook in the export layout."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(HEADER_LABELS)
    sheet.append(list(header_values))
    sheet.append(DATA_HEADER)
    for row in rows:
        sheet.append(list(row))
    workbook.save(path)
    return path


def write_recall_csv(
    path: Path,
    header_values: Sequence[object],
    rows: Sequence[Sequence[object]],
    delimiter: str = ",",
) -> Path:
    """Write a recall CSV in the export layout."""
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle, delimiter=delimiter)
        writer.writerow(HEADER_LABELS)
        writer.writerow(list(header_values))
        writer.writerow(DATA_HEADER)
        writer.writerows(rows)
    return path


def write_food_db_csv(path: Path) -> Path:
    """Write a small composition table matching the reference_table fixture."""
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["id", "food_name", "NOVA", "energy"])
        writer.writerow([APPLE, "Manzana", 1, 100])
        writer.writerow([CRISPS, "Patatas fritas", 4, 250])
        writer.writerow([NO_NOVA, "Sopa", "", 50])
        writer.writerow([NO_ENERGY, "Infusion", 2, ""])
    return path
