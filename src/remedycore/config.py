from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "RemedyCore"
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATA_DIR: Path = BUNDLED_DATA_DIR
    REPERTORY_FILE: str = "repertory_full.json"
    REMEDY_MAP_FILE: str = "remedy_map.json"
    REMEDY_PATTERNS_FILE: str = "remedy_patterns.json"
    SCORING_PARAMS_PATH: Optional[Path] = None

    FAILURE_POLICY: str = "open"
    DEFAULT_LIMIT: int = 10
    MAX_LIMIT: int = 50

    @field_validator("FAILURE_POLICY")
    @classmethod
    def validate_failure_policy(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in {"open", "closed"}:
            raise ValueError("FAILURE_POLICY must be 'open' or 'closed'.")
        return v

    @field_validator("DEFAULT_LIMIT", "MAX_LIMIT")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("limits must be >= 1.")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
