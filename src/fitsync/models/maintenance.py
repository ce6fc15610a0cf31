"""Maintenance models."""

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from fitsync.models.sync import ProgressStatus


class BulkDeleteOption(str, Enum):
    """Bulk delete strategies."""

    ALL = "ALL"
    OLD_DATA = "OLD_DATA"
    INACTIVE_PROFILES = "INACTIVE_PROFILES"


class MaintenanceStatus(ProgressStatus):
    """Status of a bulk delete operation."""

    success_field: ClassVar[str | None] = "deleted_records"

    operation: str
    deleted_records: int = 0


class CleanupResult(BaseModel):
    """Deleted record counts per entity kind."""

    deleted_profiles: int = 0
    deleted_exercises: int = 0
    deleted_exercise_templates: int = 0
    deleted_training_plans: int = 0
    deleted_workout_logs: int = 0
    deleted_max_logs: int = 0
    deleted_body_metrics: int = 0
    total_deleted: int = 0
    errors: list[str] = Field(default_factory=list)

    def compute_total(self) -> int:
        """Sum the per-kind counts into total_deleted."""
        self.total_deleted = (
            self.deleted_profiles
            + self.deleted_exercises
            + self.deleted_exercise_templates
            + self.deleted_training_plans
            + self.deleted_workout_logs
            + self.deleted_max_logs
            + self.deleted_body_metrics
        )
        return self.total_deleted


class OptimizationResult(BaseModel):
    """Outcome of a database optimization run."""

    message: str
    operations_performed: list[str] = Field(default_factory=list)
    orphaned_sessions_removed: int = 0


class IntegrityReport(BaseModel):
    """Result of a data integrity validation."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    issues: tuple[str, ...] = ()
    total_records_checked: int = 0
