"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DB_DIRNAME = "macro-tracker"
DB_FILENAME = "macros.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    state_dir: Path = Path.home() / ".macro-tracker"
    db_path: Path | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_store: bool = False
    extraction_timeout_seconds: float = 30.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_db_path(settings: Settings) -> Path:
    """Return the database file path for the configured state directory."""
    if settings.db_path is not None:
        return settings.db_path.expanduser()
    return settings.state_dir.expanduser() / DB_DIRNAME / DB_FILENAME
