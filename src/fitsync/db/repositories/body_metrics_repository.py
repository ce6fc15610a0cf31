"""Body metrics repository for database operations."""

from fitsync.db.database import Database
from fitsync.db.repositories.base import BaseRepository
from fitsync.models.body_metrics import BodyMetricRecord, HeightRecord, WeightRecord


class WeightRecordRepository(BaseRepository[WeightRecord]):
    table = "weight_records"
    model = WeightRecord
    order_by = "date"


class HeightRecordRepository(BaseRepository[HeightRecord]):
    table = "height_records"
    model = HeightRecord
    order_by = "date"


class BodyMetricsRepository:
    """Repository for weight and height history."""

    def __init__(self, db: Database) -> None:
        """Initialize repository.

        Args:
            db: Database instance
        """
        self.db = db
        self.weights = WeightRecordRepository(db)
        self.heights = HeightRecordRepository(db)

    async def save_weight(self, record: WeightRecord, use_transaction: bool = True) -> WeightRecord:
        return await self.weights.save(record, use_transaction=use_transaction)

    async def save_height(self, record: HeightRecord, use_transaction: bool = True) -> HeightRecord:
        return await self.heights.save(record, use_transaction=use_transaction)

    async def find_weight_history(self, profile_id: str) -> list[WeightRecord]:
        """Weight records of a profile, oldest first."""
        return await self.weights.find_all(profile_id)

    async def find_height_history(self, profile_id: str) -> list[HeightRecord]:
        """Height records of a profile, oldest first."""
        return await self.heights.find_all(profile_id)

    async def find_all(self, profile_id: str | None = None) -> list[BodyMetricRecord]:
        """Weight records followed by height records."""
        weights: list[BodyMetricRecord] = list(await self.weights.find_all(profile_id))
        return weights + list(await self.heights.find_all(profile_id))

    async def delete_weight(self, record_id: str, use_transaction: bool = True) -> bool:
        return await self.weights.delete(record_id, use_transaction=use_transaction)

    async def delete_height(self, record_id: str, use_transaction: bool = True) -> bool:
        return await self.heights.delete(record_id, use_transaction=use_transaction)

    async def delete_record(self, record: BodyMetricRecord, use_transaction: bool = True) -> bool:
        """Delete a record from the table matching its type.

        The two tables keep separate primary keys, so an ID alone does not
        identify a body metrics record.

        Returns:
            True if deleted, False if not found
        """
        if isinstance(record, WeightRecord):
            return await self.delete_weight(record.id, use_transaction=use_transaction)
        return await self.delete_height(record.id, use_transaction=use_transaction)
