"""Engine configuration using Pydantic Settings.

Environment variables are loaded from .env files and system environment.
Every value has a safe default so the engine works without any configuration.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings.

    All settings can be overridden via environment variables.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "flowguard"
    DEBUG: bool = False

    # Validation limits
    MAX_NODES: int = 10000
    MAX_EDGES: int = 50000
    CHECK_EXPRESSIONS: bool = True

    # Node type schema catalog (JSON list of node type schemas)
    SCHEMA_CATALOG_PATH: Path | None = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_JSON_FORMAT: bool = False

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.strip().upper() or "INFO"
        return "INFO"

    @field_validator("SCHEMA_CATALOG_PATH", mode="before")
    @classmethod
    def empty_path_is_none(cls, v: Any) -> Any:
        """Treat an empty SCHEMA_CATALOG_PATH as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached engine settings.

    Settings are cached after first load for performance.
    """
    return Settings()


# Global settings instance
settings = get_settings()
