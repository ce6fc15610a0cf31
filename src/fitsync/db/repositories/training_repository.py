"""Training plan and workout session repositories."""

from fitsync.db.repositories.base import BaseRepository
from fitsync.models.training import TrainingPlan, WorkoutSession


class TrainingPlanRepository(BaseRepository[TrainingPlan]):
    """Repository for training plan operations."""

    table = "training_plans"
    model = TrainingPlan

    async def find_ids(self) -> set[str]:
        """IDs of every stored training plan."""
        rows = await self.db.fetch_all("SELECT id FROM training_plans")
        return {row["id"] for row in rows}


class WorkoutSessionRepository(BaseRepository[WorkoutSession]):
    """Repository for workout session operations."""

    table = "workout_sessions"
    model = WorkoutSession

    async def find_by_training_plan(self, training_plan_id: str) -> list[WorkoutSession]:
        rows = await self.db.fetch_all(
            "SELECT * FROM workout_sessions WHERE training_plan_id = ? ORDER BY created_at",
            (training_plan_id,),
        )
        return [self.row_to_model(row) for row in rows]

    async def delete_many(self, session_ids: list[str], use_transaction: bool = True) -> int:
        """Delete sessions by ID.

        Args:
            session_ids: Session IDs to delete
            use_transaction: Open a transaction for this write

        Returns:
            Number of sessions deleted
        """
        if not session_ids:
            return 0

        placeholders = ",".join("?" * len(session_ids))
        sql = f"DELETE FROM workout_sessions WHERE id IN ({placeholders})"
        if use_transaction:
            async with self.db.transaction():
                cursor = await self.db.execute(sql, tuple(session_ids))
        else:
            cursor = await self.db.execute(sql, tuple(session_ids))
        return cursor.rowcount
