"""Workout log and max log models."""

from datetime import datetime

from pydantic import Field

from fitsync.models.base import DomainModel


class WorkoutLog(DomainModel):
    """A performed workout."""

    profile_id: str
    training_plan_id: str | None = None
    training_plan_name: str = ""
    session_id: str | None = None
    session_name: str = ""
    performed_group_ids: list[str] = Field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration_seconds: int | None = Field(default=None, ge=0)
    total_volume: float | None = None
    notes: str | None = None
    user_rating: int | None = Field(default=None, ge=1, le=5)


class MaxLog(DomainModel):
    """A recorded maximum lift."""

    profile_id: str
    exercise_id: str
    weight_entered_by_user: float = Field(gt=0)
    reps: int = Field(ge=1)
    date: datetime | None = None
    notes: str | None = None
    estimated_1rm: float = 0.0
