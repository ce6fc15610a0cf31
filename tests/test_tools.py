"""Tests for MCP tool wrappers."""

import json
from pathlib import Path

import pytest

from fitsync.services.maintenance_service import MaintenanceService
from fitsync.services.sync_service import SyncService
from fitsync.tools import create_error_response, maintenance_tools, sync_tools


def test_create_error_response() -> None:
    response = create_error_response("bad input", "ValidationError", {"field": "option"})

    assert response["error"] is True
    assert response["message"] == "bad input"
    assert response["error_type"] == "ValidationError"
    assert response["details"] == {"field": "option"}
    assert "timestamp" in response


def test_create_error_response_without_details() -> None:
    assert "details" not in create_error_response("oops", "ApplicationError")


@pytest.mark.asyncio
async def test_data_export_tool(
    sync_service: SyncService, sample_profile_data: dict, tmp_path: Path
) -> None:
    output = tmp_path / "out.json"

    response = await sync_tools.data_export(
        sync_service, sample_profile_data["profile"].id, str(output)
    )

    assert response["success"] is True
    assert response["counts"]["profiles"] == 1
    assert output.exists()


@pytest.mark.asyncio
async def test_data_export_tool_rejects_empty_profile(
    sync_service: SyncService, tmp_path: Path
) -> None:
    response = await sync_tools.data_export(sync_service, "  ", str(tmp_path / "out.json"))

    assert response["error"] is True
    assert response["error_type"] == "ValidationError"


@pytest.mark.asyncio
async def test_data_export_tool_csv_with_date_range(
    sync_service: SyncService, sample_profile_data: dict, tmp_path: Path
) -> None:
    response = await sync_tools.data_export(
        sync_service,
        sample_profile_data["profile"].id,
        str(tmp_path / "out.csv"),
        format="csv",
        include_metadata=True,
        start_date="2000-01-01T00:00:00Z",
        end_date="2100-01-01T00:00:00Z",
    )

    assert response["success"] is True
    assert response["format"] == "csv"
    assert len(response["files"]) == 7
    assert response["counts"]["bodyMetrics"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"format": "xml"}, "Unsupported export format: xml"),
        ({"start_date": "2024-01-01T00:00:00Z"}, "start_date and end_date must be given together"),
        (
            {"start_date": "2024-02-01T00:00:00Z", "end_date": "2024-01-01T00:00:00Z"},
            "Invalid date range: start date must be before end date",
        ),
    ],
)
async def test_data_export_tool_rejects_bad_options(
    sync_service: SyncService, tmp_path: Path, kwargs: dict, message: str
) -> None:
    response = await sync_tools.data_export(sync_service, "p1", str(tmp_path / "out"), **kwargs)

    assert response["error"] is True
    assert response["error_type"] == "ValidationError"
    assert response["message"] == message


@pytest.mark.asyncio
async def test_data_export_tool_rejects_unparseable_dates(
    sync_service: SyncService, tmp_path: Path
) -> None:
    response = await sync_tools.data_export(
        sync_service, "p1", str(tmp_path / "out.json"), start_date="yesterday", end_date="today"
    )

    assert response["error_type"] == "ValidationError"
    assert response["message"].startswith("Invalid export options:")


@pytest.mark.asyncio
async def test_data_import_tool_reports_conflicts(
    sync_service: SyncService, tmp_path: Path
) -> None:
    path = tmp_path / "bad.json"
    path.write_text(
        json.dumps({"version": "1.0.0", "profiles": [{"id": "p1"}, {"id": "p2"}]}),
        encoding="utf-8",
    )

    response = await sync_tools.data_import(sync_service, str(path))

    assert response["error"] is True
    assert response["error_type"] == "ConflictError"
    assert len(response["details"]["conflicts"]) == 2


@pytest.mark.asyncio
async def test_data_import_tool_success(sync_service: SyncService, tmp_path: Path) -> None:
    path = tmp_path / "good.json"
    path.write_text(
        json.dumps({"version": "1.0.0", "profiles": [{"id": "p1", "name": "Alice"}]}),
        encoding="utf-8",
    )

    response = await sync_tools.data_import(sync_service, str(path))

    assert response["success"] is True
    assert response["successful_records"] == 1
    assert response["is_complete"] is True


@pytest.mark.asyncio
async def test_bulk_delete_tool_invalid_option(maintenance_service: MaintenanceService) -> None:
    response = await maintenance_tools.maintenance_bulk_delete(maintenance_service, "SOME")

    assert response["error"] is True
    assert response["error_type"] == "ValidationError"
    assert response["message"] == "Invalid bulk delete option: SOME"


@pytest.mark.asyncio
async def test_bulk_delete_tool(
    maintenance_service: MaintenanceService, sample_profile_data: dict
) -> None:
    response = await maintenance_tools.maintenance_bulk_delete(maintenance_service, "ALL")

    assert response["success"] is True
    assert response["total_deleted"] == sample_profile_data["total"]


@pytest.mark.asyncio
async def test_optimize_and_validate_tools(
    maintenance_service: MaintenanceService, sample_profile_data: dict
) -> None:
    optimized = await maintenance_tools.maintenance_optimize(maintenance_service)
    validated = await maintenance_tools.maintenance_validate(maintenance_service)

    assert optimized["success"] is True
    assert optimized["orphaned_sessions_removed"] == 0
    assert validated["is_valid"] is True
    assert validated["issues"] == []
    assert validated["total_records_checked"] == 4
