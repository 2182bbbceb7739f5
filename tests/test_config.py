"""Tests for settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from diet_recall.config import Settings


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("DIET_RECALL_FOOD_DB_PATH", "/data/food_db.csv")
    monkeypatch.setenv("DIET_RECALL_CSV_FORMAT", "us")
    monkeypatch.setenv("DIET_RECALL_MAX_WORKERS", "4")

    settings = Settings(_env_file=None)

    assert settings.food_db_path == Path("/data/food_db.csv")
    assert settings.csv_format == "us"
    assert settings.max_workers == 4
    assert settings.output_csv == Path("diet.csv")
    assert settings.show_progress is True


def test_settings_reject_unknown_csv_format(monkeypatch) -> None:
    monkeypatch.setenv("DIET_RECALL_FOOD_DB_PATH", "/data/food_db.csv")

    with pytest.raises(ValidationError):
        Settings(_env_file=None, csv_format="metric")


def test_settings_require_food_db(monkeypatch) -> None:
    monkeypatch.delenv("DIET_RECALL_FOOD_DB_PATH", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
