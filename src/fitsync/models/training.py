"""Training plan and workout session models."""

from datetime import datetime

from pydantic import Field

from fitsync.models.base import DomainModel


class TrainingPlan(DomainModel):
    """Training plan owned by a profile."""

    profile_id: str
    name: str
    description: str | None = None
    is_archived: bool = False
    current_session_index: int = Field(default=0, ge=0)
    last_used: datetime | None = None


class WorkoutSession(DomainModel):
    """Planned session belonging to a training plan."""

    profile_id: str
    training_plan_id: str | None = None
    name: str
    notes: str | None = None
    execution_count: int = Field(default=0, ge=0)
