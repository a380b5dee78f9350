from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Validation defaults
    VALIDATION_MODE: Literal["fail_fast", "collect_all"] = "collect_all"
    UNKNOWN_KEYS: Literal["strip", "passthrough", "strict"] = "strip"
    MAX_DEPTH: int = Field(default=128, ge=1, le=256)

    model_config = SettingsConfigDict(
        env_prefix="SCHEMAKIT_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
