"""Domain and result models."""

from fitsync.models.body_metrics import HeightRecord, WeightRecord
from fitsync.models.exercise import Exercise, ExerciseTemplate
from fitsync.models.maintenance import (
    BulkDeleteOption,
    CleanupResult,
    IntegrityReport,
    MaintenanceStatus,
    OptimizationResult,
)
from fitsync.models.profile import Profile
from fitsync.models.sync import (
    ConflictDescriptor,
    ConflictEntry,
    DateRange,
    EntityKind,
    ExportOptions,
    ExportStatus,
    ImportStatus,
    Snapshot,
)
from fitsync.models.training import TrainingPlan, WorkoutSession
from fitsync.models.workout import MaxLog, WorkoutLog

__all__ = [
    "BulkDeleteOption",
    "CleanupResult",
    "ConflictDescriptor",
    "ConflictEntry",
    "DateRange",
    "EntityKind",
    "Exercise",
    "ExerciseTemplate",
    "ExportOptions",
    "ExportStatus",
    "HeightRecord",
    "ImportStatus",
    "IntegrityReport",
    "MaintenanceStatus",
    "MaxLog",
    "OptimizationResult",
    "Profile",
    "Snapshot",
    "TrainingPlan",
    "WeightRecord",
    "WorkoutLog",
    "WorkoutSession",
]
