"""Service layer for business logic."""

from fitsync.services.maintenance_service import MaintenanceService
from fitsync.services.sync_service import SyncService

__all__ = ["MaintenanceService", "SyncService"]
