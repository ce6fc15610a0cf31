"""Exercise and exercise template repositories."""

from fitsync.db.repositories.base import BaseRepository
from fitsync.models.exercise import Exercise, ExerciseTemplate


class ExerciseRepository(BaseRepository[Exercise]):
    """Repository for exercise operations."""

    table = "exercises"
    model = Exercise
    json_columns = frozenset({"muscle_groups", "equipment"})


class ExerciseTemplateRepository(BaseRepository[ExerciseTemplate]):
    """Repository for exercise template operations."""

    table = "exercise_templates"
    model = ExerciseTemplate
    json_columns = frozenset({"set_configuration"})
