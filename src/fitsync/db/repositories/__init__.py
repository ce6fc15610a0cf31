"""Repository modules for data access."""

from fitsync.db.repositories.base import BaseRepository
from fitsync.db.repositories.body_metrics_repository import BodyMetricsRepository
from fitsync.db.repositories.exercise_repository import (
    ExerciseRepository,
    ExerciseTemplateRepository,
)
from fitsync.db.repositories.profile_repository import ProfileRepository
from fitsync.db.repositories.training_repository import (
    TrainingPlanRepository,
    WorkoutSessionRepository,
)
from fitsync.db.repositories.workout_repository import MaxLogRepository, WorkoutLogRepository

__all__ = [
    "BaseRepository",
    "BodyMetricsRepository",
    "ExerciseRepository",
    "ExerciseTemplateRepository",
    "MaxLogRepository",
    "ProfileRepository",
    "TrainingPlanRepository",
    "WorkoutLogRepository",
    "WorkoutSessionRepository",
]
