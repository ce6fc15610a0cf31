"""Pytest configuration and fixtures for fitsync tests."""

from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from fitsync.config.settings import Settings
from fitsync.db.database import Database
from fitsync.db.repositories import (
    BodyMetricsRepository,
    ExerciseRepository,
    ExerciseTemplateRepository,
    MaxLogRepository,
    ProfileRepository,
    TrainingPlanRepository,
    WorkoutLogRepository,
    WorkoutSessionRepository,
)
from fitsync.models import (
    Exercise,
    ExerciseTemplate,
    HeightRecord,
    MaxLog,
    Profile,
    TrainingPlan,
    WeightRecord,
    WorkoutLog,
)
from fitsync.services.maintenance_service import MaintenanceService
from fitsync.services.sync_service import SyncService


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Test configuration settings (small chunks, no pauses)."""
    return Settings(
        database_path=":memory:",
        sync_chunk_size=2,
        maintenance_chunk_size=2,
        chunk_pause_seconds=0.0,
        allowed_paths=[tmp_path],
        log_level="DEBUG",
    )


@pytest_asyncio.fixture
async def memory_db() -> AsyncIterator[Database]:
    """In-memory database for fast tests."""
    db = Database(database_path=":memory:")
    await db.connect()
    await db.migrate()

    yield db

    await db.close()


@pytest_asyncio.fixture
async def profile_repository(memory_db: Database) -> ProfileRepository:
    return ProfileRepository(memory_db)


@pytest_asyncio.fixture
async def exercise_repository(memory_db: Database) -> ExerciseRepository:
    return ExerciseRepository(memory_db)


@pytest_asyncio.fixture
async def exercise_template_repository(memory_db: Database) -> ExerciseTemplateRepository:
    return ExerciseTemplateRepository(memory_db)


@pytest_asyncio.fixture
async def training_plan_repository(memory_db: Database) -> TrainingPlanRepository:
    return TrainingPlanRepository(memory_db)


@pytest_asyncio.fixture
async def workout_session_repository(memory_db: Database) -> WorkoutSessionRepository:
    return WorkoutSessionRepository(memory_db)


@pytest_asyncio.fixture
async def workout_log_repository(memory_db: Database) -> WorkoutLogRepository:
    return WorkoutLogRepository(memory_db)


@pytest_asyncio.fixture
async def max_log_repository(memory_db: Database) -> MaxLogRepository:
    return MaxLogRepository(memory_db)


@pytest_asyncio.fixture
async def body_metrics_repository(memory_db: Database) -> BodyMetricsRepository:
    return BodyMetricsRepository(memory_db)


@pytest_asyncio.fixture
async def sync_service(
    memory_db: Database,
    profile_repository: ProfileRepository,
    exercise_repository: ExerciseRepository,
    exercise_template_repository: ExerciseTemplateRepository,
    training_plan_repository: TrainingPlanRepository,
    workout_log_repository: WorkoutLogRepository,
    max_log_repository: MaxLogRepository,
    body_metrics_repository: BodyMetricsRepository,
    test_settings: Settings,
) -> SyncService:
    """Sync service over the in-memory database."""
    return SyncService(
        db=memory_db,
        profile_repository=profile_repository,
        exercise_repository=exercise_repository,
        exercise_template_repository=exercise_template_repository,
        training_plan_repository=training_plan_repository,
        workout_log_repository=workout_log_repository,
        max_log_repository=max_log_repository,
        body_metrics_repository=body_metrics_repository,
        settings=test_settings,
    )


@pytest_asyncio.fixture
async def maintenance_service(
    memory_db: Database,
    profile_repository: ProfileRepository,
    exercise_repository: ExerciseRepository,
    exercise_template_repository: ExerciseTemplateRepository,
    training_plan_repository: TrainingPlanRepository,
    workout_session_repository: WorkoutSessionRepository,
    workout_log_repository: WorkoutLogRepository,
    max_log_repository: MaxLogRepository,
    body_metrics_repository: BodyMetricsRepository,
    test_settings: Settings,
) -> MaintenanceService:
    """Maintenance service over the in-memory database."""
    return MaintenanceService(
        db=memory_db,
        profile_repository=profile_repository,
        exercise_repository=exercise_repository,
        exercise_template_repository=exercise_template_repository,
        training_plan_repository=training_plan_repository,
        workout_session_repository=workout_session_repository,
        workout_log_repository=workout_log_repository,
        max_log_repository=max_log_repository,
        body_metrics_repository=body_metrics_repository,
        settings=test_settings,
    )


@pytest_asyncio.fixture
async def sample_profile_data(
    profile_repository: ProfileRepository,
    exercise_repository: ExerciseRepository,
    exercise_template_repository: ExerciseTemplateRepository,
    training_plan_repository: TrainingPlanRepository,
    workout_log_repository: WorkoutLogRepository,
    max_log_repository: MaxLogRepository,
    body_metrics_repository: BodyMetricsRepository,
) -> dict:
    """One profile with 3 exercises, 1 template, 1 plan, 2 workouts,
    1 max log, 2 weight records and 1 height record (12 records)."""
    now = datetime.now(timezone.utc)

    profile = await profile_repository.save(Profile(name="Alice"))
    exercises = [
        await exercise_repository.save(
            Exercise(
                profile_id=profile.id,
                name=name,
                muscle_groups=["legs"] if name == "Squat" else ["chest"],
                equipment=["barbell"],
            )
        )
        for name in ("Squat", "Bench Press", "Push Up")
    ]
    template = await exercise_template_repository.save(
        ExerciseTemplate(
            profile_id=profile.id,
            exercise_id=exercises[0].id,
            name="5x5",
            set_configuration={"sets": 5, "reps": 5},
        )
    )
    plan = await training_plan_repository.save(
        TrainingPlan(profile_id=profile.id, name="Strength Block")
    )
    workouts = [
        await workout_log_repository.save(
            WorkoutLog(
                profile_id=profile.id,
                training_plan_id=plan.id,
                training_plan_name=plan.name,
                performed_group_ids=["g1", "g2"],
                start_time=now - timedelta(days=days),
                duration_seconds=3600,
                user_rating=4,
            )
        )
        for days in (1, 3)
    ]
    max_log = await max_log_repository.save(
        MaxLog(
            profile_id=profile.id,
            exercise_id=exercises[0].id,
            weight_entered_by_user=140.0,
            reps=3,
            date=now - timedelta(days=2),
            estimated_1rm=148.2,
        )
    )
    weights = [
        await body_metrics_repository.save_weight(
            WeightRecord(profile_id=profile.id, weight=weight, date=now - timedelta(days=days))
        )
        for weight, days in ((81.5, 10), (80.9, 1))
    ]
    height = await body_metrics_repository.save_height(
        HeightRecord(profile_id=profile.id, height=178.0)
    )

    return {
        "profile": profile,
        "exercises": exercises,
        "template": template,
        "plan": plan,
        "workouts": workouts,
        "max_log": max_log,
        "weights": weights,
        "height": height,
        "total": 12,
    }
