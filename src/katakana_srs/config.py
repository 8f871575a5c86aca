"""Settings loaded from the environment (prefix KATAKANA_SRS_) or a .env file."""
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = str(Path.home() / ".katakana_srs" / "katakana.db")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="KATAKANA_SRS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_path: str = Field(default=DEFAULT_DB_PATH, description="SQLite database file")
    log_level: str = Field(default="WARNING", description="loguru level for the stderr sink")
    # "first_attempt": correct-first-try items start at Apprentice II.
    # "stage_zero": every new item starts at Apprentice I.
    lesson_seed_policy: Literal["first_attempt", "stage_zero"] = Field(
        default="first_attempt",
        description="How completed lessons seed their review records",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
