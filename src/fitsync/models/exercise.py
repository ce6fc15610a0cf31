"""Exercise and exercise template models."""

from typing import Any

from pydantic import Field

from fitsync.models.base import DomainModel


class Exercise(DomainModel):
    """Exercise definition owned by a profile."""

    profile_id: str
    name: str
    description: str = ""
    category: str = "strength"
    muscle_groups: list[str] = Field(default_factory=list)
    equipment: list[str] = Field(default_factory=list)
    notes: str | None = None


class ExerciseTemplate(DomainModel):
    """Reusable set configuration for an exercise."""

    profile_id: str
    exercise_id: str
    name: str
    set_configuration: dict[str, Any] = Field(default_factory=dict)
    notes: str | None = None
