"""Application settings management using Pydantic Settings."""

from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_db_path() -> str:
    """Get default database path in the working directory."""
    return str(Path.cwd() / "data" / "fitsync.db")


class Settings(BaseSettings):
    """Application configuration settings.

    All settings can be configured via environment variables with the
    prefix `FITSYNC_`. For example, `FITSYNC_DATABASE_PATH`.
    """

    # Database
    database_path: str = Field(
        default_factory=_get_default_db_path,
        description="SQLite database file path",
    )

    # Export/import
    export_version: str = Field(
        default="1.0.0", description="Snapshot format version written and expected"
    )
    sync_chunk_size: int = Field(
        default=100,
        ge=1,
        le=10_000,
        description="Records per chunk for export and import",
    )
    chunk_pause_seconds: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Cooperative pause between chunks (seconds)",
    )
    conflict_threshold: float = Field(
        default=0.5,
        gt=0.0,
        le=1.0,
        description="Import failure ratio at which the import is reported as a conflict",
    )
    allowed_paths: list[Path] = Field(
        default_factory=list,
        description="Extra base directories allowed for snapshot files",
    )

    # Maintenance
    maintenance_chunk_size: int = Field(
        default=50,
        ge=1,
        le=10_000,
        description="Records per chunk for bulk deletions",
    )
    retention_years: int = Field(
        default=2,
        ge=1,
        description="Workout and max logs older than this are OLD_DATA",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_prefix="FITSYNC_", env_file=".env", env_file_encoding="utf-8"
    )

    @model_validator(mode="after")
    def validate_version(self) -> Self:
        """Validate the snapshot version string."""
        if not self.export_version.strip():
            raise ValueError("export_version must not be empty")
        return self
