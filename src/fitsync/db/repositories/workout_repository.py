"""Workout log and max log repositories."""

from datetime import datetime

from fitsync.db.repositories.base import BaseRepository
from fitsync.models.workout import MaxLog, WorkoutLog


class WorkoutLogRepository(BaseRepository[WorkoutLog]):
    """Repository for workout log operations."""

    table = "workout_logs"
    model = WorkoutLog
    json_columns = frozenset({"performed_group_ids"})

    async def find_started_before(self, cutoff: datetime) -> list[WorkoutLog]:
        """Workout logs across all profiles that started before `cutoff`.

        Logs without a start time are never returned.
        """
        return [
            log
            for log in await self.find_all()
            if log.start_time is not None and log.start_time < cutoff
        ]


class MaxLogRepository(BaseRepository[MaxLog]):
    """Repository for max log operations."""

    table = "max_logs"
    model = MaxLog

    async def find_dated_before(self, cutoff: datetime) -> list[MaxLog]:
        """Max logs across all profiles dated before `cutoff` (undated excluded)."""
        return [
            log for log in await self.find_all() if log.date is not None and log.date < cutoff
        ]
