"""Tests for domain and result models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from fitsync.exceptions import ConflictError
from fitsync.models import (
    CleanupResult,
    ConflictDescriptor,
    EntityKind,
    IntegrityReport,
    MaxLog,
    Profile,
    Snapshot,
    WeightRecord,
    WorkoutLog,
)
from fitsync.models.sync import ENTITY_ORDER


class TestDomainModel:
    def test_plain_form_uses_camel_case(self) -> None:
        log = WorkoutLog(profile_id="p1", performed_group_ids=["g1"])
        plain = log.to_plain()

        assert plain["profileId"] == "p1"
        assert plain["performedGroupIds"] == ["g1"]
        assert "profile_id" not in plain

    def test_hydrate_accepts_camel_and_snake_keys(self) -> None:
        camel = MaxLog.hydrate(
            {"profileId": "p1", "exerciseId": "e1", "weightEnteredByUser": 100, "reps": 5}
        )
        snake = MaxLog.hydrate(
            {"profile_id": "p1", "exercise_id": "e1", "weight_entered_by_user": 100, "reps": 5}
        )
        assert camel.weight_entered_by_user == snake.weight_entered_by_user == 100.0

    def test_naive_datetimes_become_utc(self) -> None:
        log = WorkoutLog(profile_id="p1", start_time=datetime(2024, 1, 1, 8, 30))
        assert log.start_time.tzinfo is not None
        assert log.start_time.utcoffset() == timedelta(0)

    def test_offset_datetimes_are_converted_to_utc(self) -> None:
        record = WorkoutLog.hydrate(
            {"profileId": "p1", "startTime": "2024-01-01T10:00:00+02:00"}
        )
        assert record.start_time == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

    def test_field_constraints(self) -> None:
        with pytest.raises(ValidationError):
            WeightRecord(profile_id="p1", weight=0)
        with pytest.raises(ValidationError):
            MaxLog(profile_id="p1", exercise_id="e1", weight_entered_by_user=50, reps=0)
        with pytest.raises(ValidationError):
            WorkoutLog(profile_id="p1", user_rating=6)


class TestProfile:
    def test_valid_profile(self) -> None:
        assert Profile(name="Alice").validation_errors() == []

    def test_name_too_long(self) -> None:
        errors = Profile(name="x" * 101).validation_errors()
        assert errors == ["name must be at most 100 characters"]

    def test_multiple_errors(self) -> None:
        now = datetime.now(timezone.utc)
        profile = Profile(name="", created_at=now, updated_at=now - timedelta(seconds=1))
        assert profile.validation_errors() == [
            "name must not be empty",
            "updated_at must not precede created_at",
        ]


class TestSnapshot:
    def test_entity_order_puts_owners_first(self) -> None:
        assert ENTITY_ORDER[0] is EntityKind.PROFILES
        assert ENTITY_ORDER[-1] is EntityKind.BODY_METRICS
        assert ENTITY_ORDER.index(EntityKind.TRAINING_PLANS) < ENTITY_ORDER.index(
            EntityKind.WORKOUT_LOGS
        )

    def test_kind_names(self) -> None:
        assert EntityKind.EXERCISE_TEMPLATES.field_name == "exercise_templates"
        assert EntityKind.EXERCISE_TEMPLATES.label == "exercise templates"

    def test_parse_persisted_form(self) -> None:
        snapshot = Snapshot.model_validate(
            {
                "version": "1.0.0",
                "exportedAt": "2024-05-01T12:00:00Z",
                "profiles": [{"id": "p1", "name": "A"}],
                "maxLogs": [{"id": "m1"}],
            }
        )
        assert snapshot.total_records() == 2
        assert snapshot.records(EntityKind.MAX_LOGS) == [{"id": "m1"}]
        assert snapshot.counts()["maxLogs"] == 1
        assert snapshot.exercise_templates == []


class TestResults:
    def test_conflict_descriptor_enumerates_errors(self) -> None:
        descriptor = ConflictDescriptor.from_errors("Import conflicts detected", ["a", "b"])

        assert [(c.index, c.message, c.kind) for c in descriptor.conflicts] == [
            (0, "a", "import_failure"),
            (1, "b", "import_failure"),
        ]
        with pytest.raises(ValidationError):
            descriptor.message = "changed"

    def test_conflict_error_to_dict(self) -> None:
        descriptor = ConflictDescriptor.from_errors("Import conflicts detected", ["bad record"])
        error = ConflictError("Import conflicts detected", descriptor)

        data = error.to_dict()
        assert data["message"] == "Import conflicts detected"
        assert data["conflicts"] == [
            {"message": "bad record", "kind": "import_failure", "index": 0}
        ]

    def test_cleanup_total(self) -> None:
        result = CleanupResult(deleted_profiles=1, deleted_workout_logs=4, deleted_body_metrics=2)
        assert result.compute_total() == 7
        assert result.total_deleted == 7

    def test_integrity_report_is_immutable(self) -> None:
        report = IntegrityReport(is_valid=False, issues=("x",), total_records_checked=1)
        with pytest.raises(ValidationError):
            report.is_valid = True
