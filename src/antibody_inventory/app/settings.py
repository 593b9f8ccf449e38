# src/antibody_inventory/app/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Compute project root: repo/ (three levels up from repo/src/antibody_inventory/app/settings.py)
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DB = DATA_DIR / "antibody_inventory.db"
DEFAULT_EXPORT_DIR = DATA_DIR / "exports"


class Settings(BaseSettings):
    """
    Central application configuration.

    Sources (highest precedence first):
      1. Environment variables (prefixed with APP_, e.g. APP_DB_PATH)
      2. .env file at data/.env
      3. Defaults below
    """

    model_config = SettingsConfigDict(
        env_file=str(DATA_DIR / ".env"),
        env_prefix="APP_",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # Paths
    db_path: Path = Field(default=DEFAULT_DB, description="SQLite file holding the key/value slots")
    export_dir: Path = Field(default=DEFAULT_EXPORT_DIR, description="Backup export directory")

    # Key/value slots
    storage_key: str = Field(default="antibody_storage_v1_db", description="Inventory slot")
    options_key: str = Field(
        default="antibody_dropdown_custom_options_v1", description="Custom dropdown options slot"
    )
    options_cap: int = Field(default=50, gt=0, description="Max custom options kept per field")

    # --- Validators / normalizers ---
    @field_validator("db_path", "export_dir", mode="before")
    @classmethod
    def _expand_user_and_env(cls, v):
        if isinstance(v, str | Path):
            return Path(str(v)).expanduser()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    # --- Helpers ---
    def ensure_directories(self) -> None:
        """Create parent dirs for the DB and the export dir (idempotent)."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.export_dir.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Singleton-style accessor so imports are cheap and consistent system-wide.
    Also ensures directories exist on first access.
    """
    s = Settings()
    s.ensure_directories()
    return s
