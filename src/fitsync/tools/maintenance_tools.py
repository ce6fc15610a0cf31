"""Maintenance MCP tools."""

from typing import Any

from fitsync.services.maintenance_service import MaintenanceService
from fitsync.tools import error_from_exception


async def maintenance_bulk_delete(
    service: MaintenanceService,
    option: str,
) -> dict[str, Any]:
    """Bulk delete records.

    Args:
        service: Maintenance service instance
        option: ALL, OLD_DATA or INACTIVE_PROFILES

    Returns:
        Deleted counts per kind, total and per-record errors
    """
    result = await service.bulk_delete(option)
    if result.is_failure:
        return error_from_exception(result.error)
    return {"success": True, "option": option, **result.unwrap().model_dump()}


async def maintenance_optimize(service: MaintenanceService) -> dict[str, Any]:
    """Analyze, reindex and clean up orphaned workout sessions."""
    result = await service.optimize_database()
    if result.is_failure:
        return error_from_exception(result.error)
    return {"success": True, **result.unwrap().model_dump()}


async def maintenance_validate(service: MaintenanceService) -> dict[str, Any]:
    """Report profile schema problems and orphaned profile references."""
    result = await service.validate_data_integrity()
    if result.is_failure:
        return error_from_exception(result.error)
    report = result.unwrap()
    return {
        "success": True,
        "is_valid": report.is_valid,
        "issues": list(report.issues),
        "total_records_checked": report.total_records_checked,
    }
