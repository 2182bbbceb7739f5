"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

CsvFormat = Literal["euro", "us"]


class Settings(BaseSettings):
    """Batch settings loaded from environment variables."""

    food_db_path: Path
    output_csv: Path | None = Path("diet.csv")
    csv_format: CsvFormat = "euro"
    max_workers: int = Field(default=1, ge=1)
    show_progress: bool = True
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="DIET_RECALL_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
