"""MCP server implementation for fitsync."""

from typing import Any

from mcp.server.fastmcp import FastMCP

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
from fitsync.services.maintenance_service import MaintenanceService
from fitsync.services.sync_service import SyncService
from fitsync.tools import maintenance_tools, sync_tools

# Initialize FastMCP server
mcp = FastMCP("fitsync")

# Global service instances (initialized in main)
sync_service: SyncService | None = None
maintenance_service: MaintenanceService | None = None
db: Database | None = None


async def initialize_services(settings: Settings) -> None:
    """Initialize all services and database.

    Args:
        settings: Application settings
    """
    global sync_service, maintenance_service, db

    db = Database(settings.database_path)
    await db.connect()
    await db.migrate()

    profile_repo = ProfileRepository(db)
    exercise_repo = ExerciseRepository(db)
    template_repo = ExerciseTemplateRepository(db)
    plan_repo = TrainingPlanRepository(db)
    session_repo = WorkoutSessionRepository(db)
    workout_repo = WorkoutLogRepository(db)
    max_log_repo = MaxLogRepository(db)
    body_metrics_repo = BodyMetricsRepository(db)

    sync_service = SyncService(
        db,
        profile_repo,
        exercise_repo,
        template_repo,
        plan_repo,
        workout_repo,
        max_log_repo,
        body_metrics_repo,
        settings,
    )
    maintenance_service = MaintenanceService(
        db,
        profile_repo,
        exercise_repo,
        template_repo,
        plan_repo,
        session_repo,
        workout_repo,
        max_log_repo,
        body_metrics_repo,
        settings,
    )


async def shutdown_services() -> None:
    """Shutdown all services and close database."""
    global db
    if db:
        await db.close()
        db = None


# Export/import tools
@mcp.tool()
async def data_export(
    profile_id: str,
    output_path: str,
    format: str = "json",
    include_metadata: bool = False,
    start_date: str | None = None,
    end_date: str | None = None,
) -> dict[str, Any]:
    """Export all data of a profile to a JSON snapshot or per-kind CSV files.

    Args:
        profile_id: Profile ID to export
        output_path: Destination file path (CSV files are named after its stem)
        format: "json" (importable snapshot) or "csv"
        include_metadata: Add export date and record count to the output
        start_date: ISO-8601 start of a date range for workout logs, max logs
            and body metrics
        end_date: ISO-8601 end of that range, exclusive

    Returns:
        Written file(s), size, snapshot version and record counts per kind
    """
    if not sync_service:
        raise RuntimeError("Services not initialized")
    return await sync_tools.data_export(
        sync_service,
        profile_id,
        output_path,
        format=format,
        include_metadata=include_metadata,
        start_date=start_date,
        end_date=end_date,
    )


@mcp.tool()
async def data_import(input_path: str) -> dict[str, Any]:
    """Import a JSON snapshot file (existing records are updated).

    Args:
        input_path: Snapshot file path

    Returns:
        Import status, or a ConflictError listing failures when half or
        more of the records could not be imported
    """
    if not sync_service:
        raise RuntimeError("Services not initialized")
    return await sync_tools.data_import(sync_service, input_path)


# Maintenance tools
@mcp.tool()
async def maintenance_bulk_delete(option: str) -> dict[str, Any]:
    """Bulk delete records.

    Args:
        option: ALL (everything), OLD_DATA (logs past retention) or
            INACTIVE_PROFILES (inactive profiles and their data)

    Returns:
        Deleted record counts and per-record errors
    """
    if not maintenance_service:
        raise RuntimeError("Services not initialized")
    return await maintenance_tools.maintenance_bulk_delete(maintenance_service, option)


@mcp.tool()
async def maintenance_optimize() -> dict[str, Any]:
    """Optimize the database and remove orphaned workout sessions.

    Returns:
        Operations performed and number of sessions removed
    """
    if not maintenance_service:
        raise RuntimeError("Services not initialized")
    return await maintenance_tools.maintenance_optimize(maintenance_service)


@mcp.tool()
async def maintenance_validate() -> dict[str, Any]:
    """Validate profiles and check for orphaned profile references.

    Returns:
        Validity flag, issues found and number of records checked
    """
    if not maintenance_service:
        raise RuntimeError("Services not initialized")
    return await maintenance_tools.maintenance_validate(maintenance_service)


def create_server() -> FastMCP:
    """Create and return MCP server instance.

    Returns:
        FastMCP server instance
    """
    return mcp
