"""Export/import MCP tools."""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from fitsync.models.sync import ExportOptions
from fitsync.services.sync_service import SyncService
from fitsync.tools import create_error_response, error_from_exception

logger = logging.getLogger(__name__)


async def data_export(
    service: SyncService,
    profile_id: str,
    output_path: str,
    format: str = "json",
    include_metadata: bool = False,
    start_date: str | None = None,
    end_date: str | None = None,
) -> dict[str, Any]:
    """Export a profile's data to a JSON snapshot or per-kind CSV files.

    Args:
        service: Sync service instance
        profile_id: Profile to export
        output_path: Destination file path
        format: "json" or "csv"
        include_metadata: Add export date and record count to the output
        start_date: ISO-8601 start of the date range (requires end_date)
        end_date: ISO-8601 end of the date range, exclusive

    Returns:
        Written file(s), size, version and per-kind record counts

    Error types:
        - ValidationError: Empty profile ID, disallowed path, unsupported
          format or invalid date range
        - ApplicationError: Export or file write failed
    """
    if not profile_id or not profile_id.strip():
        return create_error_response(
            message="profile_id cannot be empty",
            error_type="ValidationError",
        )

    if (start_date is None) != (end_date is None):
        return create_error_response(
            message="start_date and end_date must be given together",
            error_type="ValidationError",
        )

    try:
        options = ExportOptions(
            format=format,
            include_metadata=include_metadata,
            date_range=(
                {"start": start_date, "end": end_date} if start_date is not None else None
            ),
        )
    except PydanticValidationError as e:
        return create_error_response(
            message=f"Invalid export options: {e}",
            error_type="ValidationError",
        )

    result = await service.export_to_file(profile_id, output_path, options=options)
    if result.is_failure:
        return error_from_exception(result.error)

    return {"success": True, **result.unwrap()}


async def data_import(
    service: SyncService,
    input_path: str,
) -> dict[str, Any]:
    """Import a JSON snapshot file.

    Args:
        service: Sync service instance
        input_path: Snapshot file path

    Returns:
        Final import status (partial failures listed in errors)

    Error types:
        - ValidationError: Missing, disallowed or malformed file
        - ConflictError: Too many records failed; details list every failure
        - ApplicationError: Unexpected import failure
    """
    result = await service.import_from_file(input_path)
    if result.is_failure:
        logger.warning("Import of %s failed: %s", input_path, result.error)
        return error_from_exception(result.error)

    status = result.unwrap()
    return {"success": True, **status.model_dump()}
