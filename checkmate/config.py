"""checkmate configuration loaded from environment variables."""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings loaded from environment variables with the CHECKMATE_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="CHECKMATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Execution
    concurrent: bool = False
    max_workers: int | None = Field(default=None, ge=1)

    # Reporting
    failure_preview: int = Field(default=5, ge=1)

    # Logging
    structured_logging: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v!r}")
        return level


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]
    logger.debug(
        "Loaded settings: concurrent=%s max_workers=%s",
        settings.concurrent,
        settings.max_workers,
    )
    return settings
