"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local SQLite storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "moleculex.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms
    acquire_timeout: float = 10.0  # s

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class RemoteSettings(BaseSettings):
    """Remote backing store configuration."""

    model_config = SettingsConfigDict(env_prefix="REMOTE_")

    backend: Literal["sqlite", "rest"] = "sqlite"

    # PostgREST / Supabase REST endpoint
    base_url: str = "http://localhost:54321"
    api_key: str = ""
    schema_name: str = "public"
    timeout: float = 30.0

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0


class SeedSettings(BaseSettings):
    """Catalog seeding configuration."""

    model_config = SettingsConfigDict(env_prefix="SEED_")

    concurrency: int = Field(default=1, ge=1)


class DashboardSettings(BaseSettings):
    """Derived view sizes."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    recent_activity: int = 5
    top_families: int = 4
    recent_formulas: int = 6


class SnapshotSettings(BaseSettings):
    """Backup document configuration."""

    model_config = SettingsConfigDict(env_prefix="SNAPSHOT_")

    format_version: int = 1


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "MoleculeX"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    seed: SeedSettings = Field(default_factory=SeedSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
    snapshot: SnapshotSettings = Field(default_factory=SnapshotSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
