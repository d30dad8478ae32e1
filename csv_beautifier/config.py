"""Service configuration.

Uses pydantic-settings; every field can be overridden with a
``CSV_BEAUTIFIER_`` prefixed environment variable or a ``.env`` file.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CSV_BEAUTIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Root logging level")
    max_upload_bytes: int = Field(
        default=20 * 1024 * 1024,
        description="Largest accepted upload; the whole file is held in memory",
    )
    allowed_suffixes: List[str] = Field(default_factory=lambda: [".csv"])
    preview_rows: int = Field(default=20, description="Rows kept for before/after previews")


@lru_cache
def get_settings() -> Settings:
    return Settings()
