"""Tests for the food reference table."""

import pytest

from diet_recall.adapters.food_db import load_reference_table
from diet_recall.domain.recall import FoodReference, ReferenceTable
from tests.conftest import APPLE, NO_ENERGY, NO_NOVA, write_food_db_csv


def test_reference_table_rejects_duplicate_ids() -> None:
    foods = [
        FoodReference(1, energy_per_100g=10, processing_tier=1),
        FoodReference(1, energy_per_100g=20, processing_tier=2),
    ]

    with pytest.raises(ValueError, match="Duplicate food id"):
        ReferenceTable(foods)


def test_reference_table_is_a_read_only_mapping(reference_table) -> None:
    assert len(reference_table) == 4
    assert APPLE in reference_table
    assert reference_table.get(12345) is None
    with pytest.raises(TypeError):
        reference_table[APPLE] = None


def test_load_reference_table_from_csv(tmp_path) -> None:
    path = write_food_db_csv(tmp_path / "food_db.csv")

    table = load_reference_table(path)

    assert len(table) == 4
    assert table[APPLE].energy_per_100g == 100
    assert table[APPLE].processing_tier == 1
    assert table[APPLE].food_name == "Manzana"
    assert table[NO_NOVA].processing_tier is None
    assert table[NO_ENERGY].energy_per_100g is None


def test_load_reference_table_requires_columns(tmp_path) -> None:
    path = tmp_path / "food_db.csv"
    path.write_text("id,energy\n1,100\n", encoding="utf-8")

    with pytest.raises(ValueError, match="NOVA"):
        load_reference_table(path)


def test_load_reference_table_rejects_out_of_range_nova(tmp_path) -> None:
    path = tmp_path / "food_db.csv"
    path.write_text("id,energy,NOVA\n1,100,7\n", encoding="utf-8")

    with pytest.raises(ValueError, match="invalid food row"):
        load_reference_table(path)


def test_load_reference_table_from_semicolon_csv(tmp_path) -> None:
    path = tmp_path / "food_db.csv"
    path.write_text(
        "id;food_name;NOVA;energy\n1;Pan, integral;1;247,5\n2;Refresco;4;\n",
        encoding="utf-8",
    )

    table = load_reference_table(path)

    assert table[1].energy_per_100g == 247.5
    assert table[1].food_name == "Pan, integral"
    assert table[2].energy_per_100g is None
    assert table[2].processing_tier == 4
