"""Export/import models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel, to_snake

from fitsync.models.base import utc_now


class EntityKind(str, Enum):
    """Entity kinds carried in a snapshot, valued by their snapshot key."""

    PROFILES = "profiles"
    EXERCISES = "exercises"
    EXERCISE_TEMPLATES = "exerciseTemplates"
    TRAINING_PLANS = "trainingPlans"
    WORKOUT_LOGS = "workoutLogs"
    MAX_LOGS = "maxLogs"
    BODY_METRICS = "bodyMetrics"

    @property
    def field_name(self) -> str:
        """Attribute name on Snapshot."""
        return to_snake(self.value)

    @property
    def label(self) -> str:
        """Human-readable name used in messages."""
        return self.field_name.replace("_", " ")


# Dependency order: owners before the records referencing them.
ENTITY_ORDER: tuple[EntityKind, ...] = tuple(EntityKind)


class Snapshot(BaseModel):
    """Versioned serialization of one profile's entire dataset."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str
    exported_at: datetime = Field(default_factory=utc_now)
    profiles: list[dict[str, Any]] = Field(default_factory=list)
    exercises: list[dict[str, Any]] = Field(default_factory=list)
    exercise_templates: list[dict[str, Any]] = Field(default_factory=list)
    training_plans: list[dict[str, Any]] = Field(default_factory=list)
    workout_logs: list[dict[str, Any]] = Field(default_factory=list)
    max_logs: list[dict[str, Any]] = Field(default_factory=list)
    body_metrics: list[dict[str, Any]] = Field(default_factory=list)

    def records(self, kind: EntityKind) -> list[dict[str, Any]]:
        """Records of one entity kind."""
        return getattr(self, kind.field_name)

    def total_records(self) -> int:
        """Number of records across all kinds."""
        return sum(len(self.records(kind)) for kind in EntityKind)

    def counts(self) -> dict[str, int]:
        """Per-kind record counts keyed by snapshot key."""
        return {kind.value: len(self.records(kind)) for kind in EntityKind}

    def to_plain(self) -> dict[str, Any]:
        """Persisted (camelCase, JSON-compatible) form."""
        return self.model_dump(mode="json", by_alias=True)


SUPPORTED_EXPORT_FORMATS: tuple[str, ...] = ("json", "csv")


class DateRange(BaseModel):
    """Half-open time window `[start, end)` used to filter dated records."""

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def contains(self, moment: datetime | None) -> bool:
        return moment is not None and self.start <= moment < self.end


class ExportOptions(BaseModel):
    """How an export is written to disk.

    `format` stays a plain string so that unsupported values reach
    `SyncService.validate_export_options` and fail as a domain error.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    format: str = "json"
    include_metadata: bool = False
    date_range: DateRange | None = None


class ProgressStatus(BaseModel):
    """Progress of a long-running pipeline.

    `success_field` names the counter that successful units increment,
    or None when the pipeline does not track successes separately.
    """

    success_field: ClassVar[str | None] = None

    total_records: int = 0
    processed_records: int = 0
    failed_records: int = 0
    is_complete: bool = False
    errors: list[str] = Field(default_factory=list)


class ExportStatus(ProgressStatus):
    """Status of a data export."""


class ImportStatus(ProgressStatus):
    """Status of a data import."""

    success_field: ClassVar[str | None] = "successful_records"

    successful_records: int = 0

    @property
    def failure_rate(self) -> float:
        if self.total_records == 0:
            return 0.0
        return self.failed_records / self.total_records


class ConflictEntry(BaseModel):
    """One failure reported in a conflict."""

    model_config = ConfigDict(frozen=True)

    message: str
    kind: Literal["import_failure"] = "import_failure"
    index: int


class ConflictDescriptor(BaseModel):
    """Failures of an import whose failure rate crossed the conflict threshold."""

    model_config = ConfigDict(frozen=True)

    message: str
    conflicts: tuple[ConflictEntry, ...] = ()

    @classmethod
    def from_errors(cls, message: str, errors: list[str]) -> "ConflictDescriptor":
        return cls(
            message=message,
            conflicts=tuple(
                ConflictEntry(message=error, index=index) for index, error in enumerate(errors)
            ),
        )
