"""Service for chunked export and import of a profile's dataset."""

import asyncio
import csv
import json
import logging
from functools import partial
from pathlib import Path
from typing import Any, TextIO

from fitsync.config.settings import Settings
from fitsync.db.database import Database
from fitsync.db.repositories.base import BaseRepository
from fitsync.db.repositories.body_metrics_repository import BodyMetricsRepository
from fitsync.db.repositories.exercise_repository import (
    ExerciseRepository,
    ExerciseTemplateRepository,
)
from fitsync.db.repositories.profile_repository import ProfileRepository
from fitsync.db.repositories.training_repository import TrainingPlanRepository
from fitsync.db.repositories.workout_repository import MaxLogRepository, WorkoutLogRepository
from fitsync.exceptions import ApplicationError, ConflictError, ValidationError
from fitsync.models.base import DomainModel
from fitsync.models.body_metrics import HeightRecord, WeightRecord
from fitsync.models.sync import (
    ENTITY_ORDER,
    SUPPORTED_EXPORT_FORMATS,
    ConflictDescriptor,
    DateRange,
    EntityKind,
    ExportOptions,
    ExportStatus,
    ImportStatus,
    Snapshot,
)
from fitsync.utils.chunking import chunked
from fitsync.utils.files import write_atomically
from fitsync.utils.progress import ProgressCallback, ProgressTracker
from fitsync.utils.result import Result
from fitsync.utils.validators import validate_safe_path

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Import conflicts detected"

# Timestamp each dated kind is filtered on; other kinds are exported whole
DATED_FIELDS: dict[EntityKind, str] = {
    EntityKind.WORKOUT_LOGS: "start_time",
    EntityKind.MAX_LOGS: "date",
    EntityKind.BODY_METRICS: "date",
}


class SyncService:
    """Exports a profile's data to a Snapshot and imports Snapshots back.

    Work is split into chunks. Export emits progress after every chunk;
    import persists each chunk inside one storage transaction and keeps
    per-record success/failure accounting.
    """

    def __init__(
        self,
        db: Database,
        profile_repository: ProfileRepository,
        exercise_repository: ExerciseRepository,
        exercise_template_repository: ExerciseTemplateRepository,
        training_plan_repository: TrainingPlanRepository,
        workout_log_repository: WorkoutLogRepository,
        max_log_repository: MaxLogRepository,
        body_metrics_repository: BodyMetricsRepository,
        settings: Settings | None = None,
    ) -> None:
        """Initialize sync service.

        Args:
            db: Database instance
            profile_repository: Profile repository
            exercise_repository: Exercise repository
            exercise_template_repository: Exercise template repository
            training_plan_repository: Training plan repository
            workout_log_repository: Workout log repository
            max_log_repository: Max log repository
            body_metrics_repository: Body metrics repository
            settings: Application settings (defaults if omitted)
        """
        self.db = db
        self.profile_repository = profile_repository
        self.body_metrics_repository = body_metrics_repository
        self.settings = settings or Settings()
        # Body metrics span two tables and are routed per record instead.
        self._repositories: dict[EntityKind, BaseRepository[Any]] = {
            EntityKind.PROFILES: profile_repository,
            EntityKind.EXERCISES: exercise_repository,
            EntityKind.EXERCISE_TEMPLATES: exercise_template_repository,
            EntityKind.TRAINING_PLANS: training_plan_repository,
            EntityKind.WORKOUT_LOGS: workout_log_repository,
            EntityKind.MAX_LOGS: max_log_repository,
        }

    @property
    def chunk_size(self) -> int:
        return self.settings.sync_chunk_size

    async def _pause(self) -> None:
        """Yield to other tasks between chunks."""
        await asyncio.sleep(self.settings.chunk_pause_seconds)

    async def export_data(
        self,
        profile_id: str,
        on_progress: ProgressCallback[ExportStatus] | None = None,
        date_range: DateRange | None = None,
    ) -> Result[Snapshot]:
        """Export every record of a profile.

        Args:
            profile_id: Profile to export
            on_progress: Called with a status copy after each chunk and at the end
            date_range: Keep only workout logs, max logs and body metrics
                whose timestamp falls inside it (undated ones are dropped)

        Returns:
            Result carrying the Snapshot, or an ApplicationError
        """
        try:
            logger.info("Starting data export for profile %s", profile_id)

            (
                profiles,
                exercises,
                templates,
                plans,
                workout_logs,
                max_logs,
                weight_records,
                height_records,
            ) = await asyncio.gather(
                self.profile_repository.find_all(profile_id),
                self._repositories[EntityKind.EXERCISES].find_all(profile_id),
                self._repositories[EntityKind.EXERCISE_TEMPLATES].find_all(profile_id),
                self._repositories[EntityKind.TRAINING_PLANS].find_all(profile_id),
                self._repositories[EntityKind.WORKOUT_LOGS].find_all(profile_id),
                self._repositories[EntityKind.MAX_LOGS].find_all(profile_id),
                self.body_metrics_repository.find_weight_history(profile_id),
                self.body_metrics_repository.find_height_history(profile_id),
            )

            records_by_kind: dict[EntityKind, list[DomainModel]] = {
                EntityKind.PROFILES: profiles,
                EntityKind.EXERCISES: exercises,
                EntityKind.EXERCISE_TEMPLATES: templates,
                EntityKind.TRAINING_PLANS: plans,
                EntityKind.WORKOUT_LOGS: workout_logs,
                EntityKind.MAX_LOGS: max_logs,
                EntityKind.BODY_METRICS: [*weight_records, *height_records],
            }
            if date_range is not None:
                for kind, field in DATED_FIELDS.items():
                    records_by_kind[kind] = [
                        record
                        for record in records_by_kind[kind]
                        if date_range.contains(getattr(record, field))
                    ]

            snapshot = Snapshot(version=self.settings.export_version)
            tracker = ProgressTracker(
                ExportStatus(total_records=sum(len(r) for r in records_by_kind.values())),
                on_progress,
            )

            for kind in ENTITY_ORDER:
                target = snapshot.records(kind)
                for chunk in chunked(records_by_kind[kind], self.chunk_size):
                    target.extend(record.to_plain() for record in chunk)
                    tracker.processed(len(chunk))
                    tracker.emit()
                    await self._pause()

            status = tracker.complete()
            logger.info(
                "Data export completed for profile %s: %d records",
                profile_id,
                status.total_records,
            )
            return Result.success(snapshot)

        except Exception as e:
            logger.exception("Failed to export data for profile %s", profile_id)
            return Result.failure(ApplicationError("Failed to export data", e))

    async def import_data(
        self,
        snapshot: Snapshot,
        on_progress: ProgressCallback[ImportStatus] | None = None,
    ) -> Result[ImportStatus]:
        """Import a snapshot with upsert semantics.

        Args:
            snapshot: Snapshot to import
            on_progress: Called with a status copy after each chunk (or body
                metrics record) and at the end

        Returns:
            Result carrying the final ImportStatus. Fails with ConflictError
            when the failure rate reaches the conflict threshold, or with
            ApplicationError on unexpected errors.
        """
        try:
            total = snapshot.total_records()
            logger.info(
                "Starting data import: version %s, %d records", snapshot.version, total
            )
            tracker = ProgressTracker(ImportStatus(total_records=total), on_progress)

            if snapshot.version != self.settings.export_version:
                tracker.add_error(
                    f"Incompatible data version: {snapshot.version}. "
                    f"Expected: {self.settings.export_version}"
                )
                logger.warning(
                    "Import version mismatch: got %s, supported %s",
                    snapshot.version,
                    self.settings.export_version,
                )

            for kind in ENTITY_ORDER:
                if kind is EntityKind.BODY_METRICS:
                    await self._import_body_metrics(snapshot.records(kind), tracker)
                else:
                    await self._import_chunked(kind, snapshot.records(kind), tracker)

            status = tracker.complete()
            logger.info(
                "Data import completed: %d succeeded, %d failed of %d",
                status.successful_records,
                status.failed_records,
                status.total_records,
            )

        except Exception as e:
            logger.exception("Failed to import data")
            return Result.failure(ApplicationError("Failed to import data", e))

        if (
            status.failed_records > 0
            and status.failure_rate >= self.settings.conflict_threshold
        ):
            logger.warning(
                "Import failure rate %.2f reached conflict threshold %.2f",
                status.failure_rate,
                self.settings.conflict_threshold,
            )
            descriptor = ConflictDescriptor.from_errors(CONFLICT_MESSAGE, status.errors)
            return Result.failure(ConflictError(CONFLICT_MESSAGE, descriptor))

        return Result.success(status)

    async def _import_chunked(
        self,
        kind: EntityKind,
        records: list[dict[str, Any]],
        tracker: ProgressTracker[ImportStatus],
    ) -> None:
        """Upsert one entity kind, one transaction per chunk.

        Outcomes are applied to the tracker only after the chunk commits,
        so a failed commit never leaves records counted twice.
        """
        repository = self._repositories[kind]

        for chunk in chunked(records, self.chunk_size):
            succeeded = 0
            failures: list[str] = []
            try:
                async with self.db.transaction():
                    for record in chunk:
                        try:
                            entity = repository.model.hydrate(record)
                            await repository.save(entity, use_transaction=False)
                            succeeded += 1
                        except Exception as e:
                            failures.append(f"Failed to import {kind.label} record: {e}")
                            logger.error(
                                "Import record failed for %s (id=%s): %s",
                                kind.value,
                                record.get("id", "unknown"),
                                e,
                            )
            except Exception as e:
                logger.error("Import chunk failed for %s: %s", kind.value, e)
                for _ in chunk:
                    tracker.failed(f"Failed to import {kind.label} chunk: {e}")
            else:
                if succeeded:
                    tracker.succeeded(succeeded)
                for message in failures:
                    tracker.failed(message)

            tracker.emit()
            await self._pause()

    async def _import_body_metrics(
        self,
        records: list[dict[str, Any]],
        tracker: ProgressTracker[ImportStatus],
    ) -> None:
        """Import body metrics one record at a time, routed by field."""
        for record in records:
            try:
                if "weight" in record:
                    await self.body_metrics_repository.save_weight(WeightRecord.hydrate(record))
                elif "height" in record:
                    await self.body_metrics_repository.save_height(HeightRecord.hydrate(record))
                else:
                    raise ValueError("Unknown body metrics record type")
                tracker.succeeded()
            except Exception as e:
                tracker.failed(f"Failed to import body metrics record: {e}")
                logger.error(
                    "Import body metrics record failed (id=%s): %s",
                    record.get("id", "unknown"),
                    e,
                )

            tracker.emit()
            await self._pause()

    def validate_export_options(self, options: ExportOptions) -> Result[None]:
        """Reject unsupported formats and empty or inverted date ranges."""
        if options.format not in SUPPORTED_EXPORT_FORMATS:
            return Result.failure(
                ValidationError(f"Unsupported export format: {options.format}")
            )
        if options.date_range and options.date_range.start >= options.date_range.end:
            return Result.failure(
                ValidationError("Invalid date range: start date must be before end date")
            )
        return Result.success(None)

    async def export_to_file(
        self,
        profile_id: str,
        output_path: str,
        on_progress: ProgressCallback[ExportStatus] | None = None,
        options: ExportOptions | None = None,
    ) -> Result[dict[str, Any]]:
        """Export a profile and write it to disk.

        JSON writes the snapshot to `output_path`. CSV writes one file per
        entity kind next to it, named `<stem>_<kind>.csv`. Every file is
        written to a temporary sibling first and then moved into place.

        Args:
            profile_id: Profile to export
            output_path: Destination file (must be under an allowed directory)
            on_progress: Progress callback forwarded to export_data
            options: Format, metadata and date range (JSON snapshot if omitted)

        Returns:
            Result carrying the written file(s), total size and per-kind counts
        """
        options = options or ExportOptions()
        checked = self.validate_export_options(options)
        if checked.is_failure:
            logger.warning("Rejected export options: %s", checked.error)
            return checked  # type: ignore[return-value]

        try:
            path = validate_safe_path(output_path, self.settings.allowed_paths)
        except ValidationError as e:
            return Result.failure(e)

        result = await self.export_data(profile_id, on_progress, options.date_range)
        if result.is_failure:
            return result  # type: ignore[return-value]

        snapshot = result.unwrap()
        written: dict[str, Any] = {"format": options.format}
        try:
            if options.format == "csv":
                files = self._write_csv_files(path, snapshot, options)
                written["files"] = {kind: str(file) for kind, (file, _) in files.items()}
                written["file_size_bytes"] = sum(size for _, size in files.values())
            else:
                written["file_path"] = str(path)
                written["file_size_bytes"] = self._write_json_file(path, snapshot, options)
        except OSError as e:
            logger.error("Failed to write export file %s: %s", path, e)
            return Result.failure(ApplicationError(f"Failed to write export file: {e}", e))

        logger.info("Wrote %s export for profile %s to %s", options.format, profile_id, path)
        return Result.success(
            {
                **written,
                "version": snapshot.version,
                "exported_at": snapshot.exported_at.isoformat(),
                "counts": snapshot.counts(),
            }
        )

    def _write_json_file(self, path: Path, snapshot: Snapshot, options: ExportOptions) -> int:
        document = snapshot.to_plain()
        if options.include_metadata:
            document["metadata"] = {
                "exportDate": snapshot.exported_at.isoformat(),
                "recordCount": snapshot.total_records(),
                "exportOptions": options.model_dump(mode="json", by_alias=True),
            }

        def write(handle: TextIO) -> None:
            json.dump(document, handle, ensure_ascii=False, indent=2)

        return write_atomically(path, write)

    def _write_csv_files(
        self, path: Path, snapshot: Snapshot, options: ExportOptions
    ) -> dict[str, tuple[Path, int]]:
        """Write one CSV per entity kind; returns path and size keyed by kind."""
        files: dict[str, tuple[Path, int]] = {}
        for kind in ENTITY_ORDER:
            records = snapshot.records(kind)
            target = path.with_name(f"{path.stem}_{kind.field_name}.csv")
            header = (
                [
                    f"Export Date: {snapshot.exported_at.isoformat()}",
                    f"Record Count: {len(records)}",
                ]
                if options.include_metadata
                else []
            )

            write = partial(_write_csv, records=records, header=header)
            files[kind.value] = (target, write_atomically(target, write))
        return files

    async def import_from_file(
        self,
        input_path: str,
        on_progress: ProgressCallback[ImportStatus] | None = None,
    ) -> Result[ImportStatus]:
        """Read a JSON snapshot file and import it.

        Args:
            input_path: Snapshot file (must be under an allowed directory)
            on_progress: Progress callback forwarded to import_data

        Returns:
            Result of import_data, or a ValidationError for unreadable input
        """
        try:
            path = validate_safe_path(input_path, self.settings.allowed_paths)
        except ValidationError as e:
            return Result.failure(e)

        if not path.exists():
            return Result.failure(ValidationError(f"Import file not found: {input_path}"))

        try:
            with open(path, encoding="utf-8") as f:
                snapshot = Snapshot.model_validate(json.load(f))
        except (OSError, ValueError) as e:
            # pydantic.ValidationError and json.JSONDecodeError are ValueErrors
            logger.warning("Rejected snapshot file %s: %s", path, e)
            return Result.failure(ValidationError(f"Invalid snapshot file: {e}", e))

        return await self.import_data(snapshot, on_progress)


def _write_csv(handle: TextIO, records: list[dict[str, Any]], header: list[str]) -> None:
    """Write plain records as CSV; an empty kind yields an empty file.

    Columns are the union of record keys in first-seen order. Lists,
    dicts and booleans are written as JSON, missing values as empty cells.
    """
    if not records:
        return
    for line in header:
        handle.write(f"# {line}\n")
    fieldnames = list(dict.fromkeys(key for record in records for key in record))
    writer = csv.DictWriter(handle, fieldnames=fieldnames, restval="")
    writer.writeheader()
    for record in records:
        writer.writerow({key: _csv_value(value) for key, value in record.items()})


def _csv_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (list, dict, bool)):
        return json.dumps(value, ensure_ascii=False)
    return value
