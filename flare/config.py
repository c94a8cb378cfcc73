"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "Flare"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | production

    # --- Storage ---
    storage_backend: str = "file"  # file | memory
    data_file: Path = Path("flare_data.json")

    # --- Tracker ---
    tracker_config_path: Path | None = None  # defaults to bundled tracker_config.yaml

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "FLARE_"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
