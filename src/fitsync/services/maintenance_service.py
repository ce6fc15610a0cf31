"""Service for bulk deletion, optimization and integrity checks."""

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from fitsync.config.settings import Settings
from fitsync.db.database import Database
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
from fitsync.exceptions import ApplicationError, ValidationError
from fitsync.models.base import DomainModel
from fitsync.models.maintenance import (
    BulkDeleteOption,
    CleanupResult,
    IntegrityReport,
    MaintenanceStatus,
    OptimizationResult,
)
from fitsync.models.profile import Profile
from fitsync.utils.chunking import chunked
from fitsync.utils.progress import ProgressCallback, ProgressTracker
from fitsync.utils.result import Result

logger = logging.getLogger(__name__)


def years_before(moment: datetime, years: int) -> datetime:
    """Same calendar date `years` earlier (Feb 29 falls back to Feb 28)."""
    try:
        return moment.replace(year=moment.year - years)
    except ValueError:
        return moment.replace(year=moment.year - years, day=28)


class MaintenanceService:
    """Service for destructive maintenance of the local datastore."""

    def __init__(
        self,
        db: Database,
        profile_repository: ProfileRepository,
        exercise_repository: ExerciseRepository,
        exercise_template_repository: ExerciseTemplateRepository,
        training_plan_repository: TrainingPlanRepository,
        workout_session_repository: WorkoutSessionRepository,
        workout_log_repository: WorkoutLogRepository,
        max_log_repository: MaxLogRepository,
        body_metrics_repository: BodyMetricsRepository,
        settings: Settings | None = None,
    ) -> None:
        """Initialize maintenance service.

        Args:
            db: Database instance
            profile_repository: Profile repository
            exercise_repository: Exercise repository
            exercise_template_repository: Exercise template repository
            training_plan_repository: Training plan repository
            workout_session_repository: Workout session repository
            workout_log_repository: Workout log repository
            max_log_repository: Max log repository
            body_metrics_repository: Body metrics repository
            settings: Application settings (defaults if omitted)
        """
        self.db = db
        self.profile_repository = profile_repository
        self.exercise_repository = exercise_repository
        self.exercise_template_repository = exercise_template_repository
        self.training_plan_repository = training_plan_repository
        self.workout_session_repository = workout_session_repository
        self.workout_log_repository = workout_log_repository
        self.max_log_repository = max_log_repository
        self.body_metrics_repository = body_metrics_repository
        self.settings = settings or Settings()

    async def bulk_delete(
        self,
        option: BulkDeleteOption | str,
        on_progress: ProgressCallback[MaintenanceStatus] | None = None,
    ) -> Result[CleanupResult]:
        """Delete records according to a bulk delete strategy.

        Args:
            option: ALL, OLD_DATA or INACTIVE_PROFILES
            on_progress: Called with a status copy as records are processed

        Returns:
            Result carrying the CleanupResult. Per-record and per-profile
            failures are listed in its errors; an unknown option fails with
            ValidationError before anything is deleted.
        """
        try:
            strategy = BulkDeleteOption(option)
        except ValueError:
            logger.warning("Rejected bulk delete option %r", option)
            return Result.failure(ValidationError(f"Invalid bulk delete option: {option}"))

        try:
            logger.info("Starting bulk delete operation %s", strategy.value)
            result = CleanupResult()

            if strategy is BulkDeleteOption.ALL:
                await self._delete_all_data(result, on_progress)
            elif strategy is BulkDeleteOption.OLD_DATA:
                await self._delete_old_data(result, on_progress)
            else:
                await self._delete_inactive_profiles(result, on_progress)

            result.compute_total()
            logger.info(
                "Bulk delete operation %s completed: %d deleted, %d errors",
                strategy.value,
                result.total_deleted,
                len(result.errors),
            )
            return Result.success(result)

        except Exception as e:
            logger.exception("Failed to perform bulk delete operation %s", strategy.value)
            return Result.failure(
                ApplicationError("Failed to perform bulk delete operation", e)
            )

    async def _delete_all_data(
        self,
        result: CleanupResult,
        on_progress: ProgressCallback[MaintenanceStatus] | None,
    ) -> None:
        profiles = await self.profile_repository.find_all()

        workout_logs: list[DomainModel] = []
        max_logs: list[DomainModel] = []
        plans: list[DomainModel] = []
        exercises: list[DomainModel] = []
        templates: list[DomainModel] = []
        body_metrics: dict[str, list[DomainModel]] = {}

        for profile in profiles:
            (
                profile_exercises,
                profile_templates,
                profile_plans,
                profile_workouts,
                profile_max_logs,
                profile_metrics,
            ) = await asyncio.gather(
                self.exercise_repository.find_all(profile.id),
                self.exercise_template_repository.find_all(profile.id),
                self.training_plan_repository.find_all(profile.id),
                self.workout_log_repository.find_all(profile.id),
                self.max_log_repository.find_all(profile.id),
                self.body_metrics_repository.find_all(profile.id),
            )
            exercises.extend(profile_exercises)
            templates.extend(profile_templates)
            plans.extend(profile_plans)
            workout_logs.extend(profile_workouts)
            max_logs.extend(profile_max_logs)
            body_metrics[profile.id] = list(profile_metrics)

        total = (
            len(profiles)
            + len(exercises)
            + len(templates)
            + len(plans)
            + len(workout_logs)
            + len(max_logs)
            + sum(len(records) for records in body_metrics.values())
        )
        tracker = ProgressTracker(
            MaintenanceStatus(operation="DELETE_ALL", total_records=total), on_progress
        )

        # Reverse dependency order
        await self._delete_chunked(
            "workout logs", workout_logs, self.workout_log_repository, result,
            tracker, "deleted_workout_logs",
        )
        await self._delete_chunked(
            "max logs", max_logs, self.max_log_repository, result,
            tracker, "deleted_max_logs",
        )
        await self._delete_chunked(
            "training plans", plans, self.training_plan_repository, result,
            tracker, "deleted_training_plans",
        )
        await self._delete_chunked(
            "exercises", exercises, self.exercise_repository, result,
            tracker, "deleted_exercises",
        )
        await self._delete_chunked(
            "exercise templates", templates, self.exercise_template_repository, result,
            tracker, "deleted_exercise_templates",
        )
        await self._delete_chunked(
            "profiles", profiles, self.profile_repository, result,
            tracker, "deleted_profiles",
        )

        for profile in profiles:
            records = body_metrics[profile.id]
            attempted = 0
            try:
                for record in records:
                    removed = await self.body_metrics_repository.delete_record(record)
                    attempted += 1
                    if removed:
                        result.deleted_body_metrics += 1
                        tracker.succeeded()
                    else:
                        message = f"Failed to delete body metrics record {record.id}: not found"
                        logger.warning(message)
                        result.errors.append(message)
                        tracker.failed(message)
            except Exception as e:
                message = f"Failed to delete body metrics for profile {profile.id}: {e}"
                logger.error(message)
                result.errors.append(message)
                tracker.failed(message, count=len(records) - attempted)
            tracker.emit()

        tracker.complete()

    async def _delete_old_data(
        self,
        result: CleanupResult,
        on_progress: ProgressCallback[MaintenanceStatus] | None,
    ) -> None:
        cutoff = years_before(datetime.now(timezone.utc), self.settings.retention_years)
        logger.info("Deleting workout and max logs older than %s", cutoff.isoformat())

        old_workout_logs = await self.workout_log_repository.find_started_before(cutoff)
        old_max_logs = await self.max_log_repository.find_dated_before(cutoff)

        tracker = ProgressTracker(
            MaintenanceStatus(
                operation="DELETE_OLD_DATA",
                total_records=len(old_workout_logs) + len(old_max_logs),
            ),
            on_progress,
        )

        await self._delete_chunked(
            "old workout logs", old_workout_logs, self.workout_log_repository, result,
            tracker, "deleted_workout_logs",
        )
        await self._delete_chunked(
            "old max logs", old_max_logs, self.max_log_repository, result,
            tracker, "deleted_max_logs",
        )

        tracker.complete()

    async def _delete_inactive_profiles(
        self,
        result: CleanupResult,
        on_progress: ProgressCallback[MaintenanceStatus] | None,
    ) -> None:
        inactive = await self.profile_repository.find_inactive()
        tracker = ProgressTracker(
            MaintenanceStatus(operation="DELETE_INACTIVE_PROFILES", total_records=len(inactive)),
            on_progress,
        )

        for profile in inactive:
            try:
                await self._delete_profile_cascade(profile, result)
                tracker.succeeded()
            except Exception as e:
                message = f"Failed to delete inactive profile {profile.id}: {e}"
                logger.error(message)
                result.errors.append(message)
                tracker.failed(message)

            tracker.emit()
            await asyncio.sleep(0)

        tracker.complete()

    async def _delete_profile_cascade(self, profile: Profile, result: CleanupResult) -> None:
        """Delete a profile's dependent records, then the profile itself.

        Only rows actually removed are counted; a row that vanished in the
        meantime is skipped.
        """
        for workout in await self.workout_log_repository.find_by_profile(profile.id):
            if await self.workout_log_repository.delete(workout.id):
                result.deleted_workout_logs += 1

        for max_log in await self.max_log_repository.find_by_profile(profile.id):
            if await self.max_log_repository.delete(max_log.id):
                result.deleted_max_logs += 1

        for plan in await self.training_plan_repository.find_by_profile(profile.id):
            if await self.training_plan_repository.delete(plan.id):
                result.deleted_training_plans += 1

        for record in await self.body_metrics_repository.find_all(profile.id):
            if await self.body_metrics_repository.delete_record(record):
                result.deleted_body_metrics += 1

        if await self.profile_repository.delete(profile.id):
            result.deleted_profiles += 1

    async def _delete_chunked(
        self,
        label: str,
        records: Sequence[DomainModel],
        repository: BaseRepository[Any],
        result: CleanupResult,
        tracker: ProgressTracker[MaintenanceStatus],
        counter: str,
    ) -> None:
        """Delete records chunk by chunk, one transaction per chunk.

        A failing record, or one already gone, is reported and skipped.
        Counts are applied once the chunk commits; if the commit itself
        fails the whole chunk is reported as failed.
        """
        for chunk in chunked(records, self.settings.maintenance_chunk_size):
            deleted = 0
            failures: list[str] = []
            try:
                async with self.db.transaction():
                    for record in chunk:
                        try:
                            if await repository.delete(record.id, use_transaction=False):
                                deleted += 1
                            else:
                                failures.append(
                                    f"Failed to delete {label} record {record.id}: not found"
                                )
                        except Exception as e:
                            failures.append(f"Failed to delete {label} record {record.id}: {e}")
            except Exception as e:
                logger.error("Delete chunk failed for %s: %s", label, e)
                for record in chunk:
                    message = f"Failed to delete {label} record {record.id}: {e}"
                    result.errors.append(message)
                    tracker.failed(message)
            else:
                _increment(result, counter, deleted)
                if deleted:
                    tracker.succeeded(deleted)
                for message in failures:
                    logger.error(message)
                    result.errors.append(message)
                    tracker.failed(message)

            tracker.emit()
            await asyncio.sleep(0)

    async def optimize_database(self) -> Result[OptimizationResult]:
        """Run maintenance steps on the datastore.

        Steps are statistics analysis, index rebuild, orphaned workout
        session cleanup and query planner optimization. Any failure aborts
        the whole run.

        Returns:
            Result carrying the performed operations, or an ApplicationError
        """
        try:
            logger.info("Starting database optimization")
            operations: list[str] = []

            await self.db.execute("ANALYZE")
            operations.append("Analyzed table statistics")

            await self.db.execute("REINDEX")
            operations.append("Rebuilt indexes")

            removed = await self._cleanup_orphaned_workout_sessions()
            operations.append("Cleaned up orphaned records")

            await self.db.execute("PRAGMA optimize")
            operations.append("Optimized query plans")

            logger.info("Database optimization completed: %d operations", len(operations))
            return Result.success(
                OptimizationResult(
                    message="Database optimization completed successfully",
                    operations_performed=operations,
                    orphaned_sessions_removed=removed,
                )
            )

        except Exception as e:
            logger.exception("Failed to optimize database")
            return Result.failure(ApplicationError("Failed to optimize database", e))

    async def _cleanup_orphaned_workout_sessions(self) -> int:
        """Delete sessions whose training plan is missing, empty or unknown.

        Returns:
            Number of sessions removed
        """
        sessions = await self.workout_session_repository.find_all()
        plan_ids = await self.training_plan_repository.find_ids()
        logger.debug("Found %d workout sessions, %d training plans", len(sessions), len(plan_ids))

        orphaned = [
            session.id
            for session in sessions
            if not session.training_plan_id or session.training_plan_id not in plan_ids
        ]
        if not orphaned:
            logger.info("No orphaned workout sessions found")
            return 0

        async with self.db.transaction():
            removed = await self.workout_session_repository.delete_many(
                orphaned, use_transaction=False
            )
        logger.info("Cleaned up %d orphaned workout sessions", removed)
        return removed

    async def validate_data_integrity(self) -> Result[IntegrityReport]:
        """Check stored schemas and orphaned profile references.

        Rows are read raw, so a row the model rejects is reported as an
        issue instead of aborting the check.

        Returns:
            Result carrying the IntegrityReport, or an ApplicationError
        """
        try:
            logger.info("Starting data integrity validation")
            issues: list[str] = []

            profile_rows = await self.profile_repository.fetch_rows()
            for row in profile_rows:
                try:
                    errors = self.profile_repository.row_to_model(row).validation_errors()
                except PydanticValidationError as e:
                    errors = _schema_errors(e)
                if errors:
                    issues.append(f"Profile {row['id']}: {', '.join(errors)}")

            profile_ids = {row["id"] for row in profile_rows}
            workout_rows = await self.workout_log_repository.fetch_rows()
            max_rows = await self.max_log_repository.fetch_rows()
            for label, repository, rows in (
                ("Workout log", self.workout_log_repository, workout_rows),
                ("Max log", self.max_log_repository, max_rows),
            ):
                for row in rows:
                    try:
                        repository.row_to_model(row)
                    except PydanticValidationError as e:
                        issues.append(f"{label} {row['id']}: {', '.join(_schema_errors(e))}")
                    if row["profile_id"] not in profile_ids:
                        issues.append(
                            f"{label} {row['id']} has orphaned profile reference: "
                            f"{row['profile_id']}"
                        )

            checked = len(profile_rows) + len(workout_rows) + len(max_rows)
            logger.info(
                "Data integrity validation completed: %d records, %d issues",
                checked,
                len(issues),
            )
            return Result.success(
                IntegrityReport(
                    is_valid=not issues,
                    issues=tuple(issues),
                    total_records_checked=checked,
                )
            )

        except Exception as e:
            logger.exception("Failed to validate data integrity")
            return Result.failure(ApplicationError("Failed to validate data integrity", e))


def _increment(result: CleanupResult, counter: str, count: int) -> None:
    setattr(result, counter, getattr(result, counter) + count)


def _schema_errors(error: PydanticValidationError) -> list[str]:
    """One `field: message` entry per schema violation."""
    return [
        f"{'.'.join(str(part) for part in detail['loc'])}: {detail['msg']}"
        for detail in error.errors()
    ]
