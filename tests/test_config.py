"""Tests for configuration settings."""

import pytest
from pydantic import ValidationError

from fitsync.config.settings import Settings


def test_defaults() -> None:
    settings = Settings()

    assert settings.export_version == "1.0.0"
    assert settings.sync_chunk_size == 100
    assert settings.maintenance_chunk_size == 50
    assert settings.conflict_threshold == 0.5
    assert settings.retention_years == 2
    assert settings.database_path.endswith("fitsync.db")


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FITSYNC_SYNC_CHUNK_SIZE", "25")
    monkeypatch.setenv("FITSYNC_RETENTION_YEARS", "5")
    monkeypatch.setenv("FITSYNC_DATABASE_PATH", "/tmp/fitsync-test.db")

    settings = Settings()

    assert settings.sync_chunk_size == 25
    assert settings.retention_years == 5
    assert settings.database_path == "/tmp/fitsync-test.db"


@pytest.mark.parametrize(
    "overrides",
    [
        {"sync_chunk_size": 0},
        {"maintenance_chunk_size": -1},
        {"conflict_threshold": 0.0},
        {"conflict_threshold": 1.5},
        {"export_version": "  "},
    ],
)
def test_invalid_values_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)
