"""Generic repository over one table of domain models."""

from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

from fitsync.db.database import Database
from fitsync.models.base import DomainModel

ModelT = TypeVar("ModelT", bound=DomainModel)

# Columns never rewritten by an update
IMMUTABLE_COLUMNS = frozenset({"id", "created_at"})


class BaseRepository(Generic[ModelT]):
    """Repository for one entity table.

    Column names equal model field names. Lists and dicts are stored as
    JSON text, datetimes as ISO-8601 strings and booleans as integers.
    Every write accepts `use_transaction`; pass False when the caller
    already holds an open transaction so the write joins it.
    """

    table: ClassVar[str]
    model: ClassVar[type[DomainModel]]
    json_columns: ClassVar[frozenset[str]] = frozenset()
    order_by: ClassVar[str] = "created_at"

    def __init__(self, db: Database) -> None:
        """Initialize repository.

        Args:
            db: Database instance
        """
        self.db = db

    @property
    def columns(self) -> list[str]:
        return list(self.model.model_fields)

    async def save(self, entity: ModelT, use_transaction: bool = True) -> ModelT:
        """Insert or update an entity (upsert by ID).

        An existing row gets every mutable column rewritten; a missing
        row is inserted with all columns, including created_at.

        Args:
            entity: Entity to persist
            use_transaction: Open a transaction for this write

        Returns:
            The persisted entity
        """
        if use_transaction:
            async with self.db.transaction():
                await self._upsert(entity)
        else:
            await self._upsert(entity)
        return entity

    async def _upsert(self, entity: ModelT) -> None:
        row = self._to_row(entity)
        cursor = await self.db.execute(
            f"SELECT id FROM {self.table} WHERE id = ?", (entity.id,)
        )
        existing = await cursor.fetchone()
        await cursor.close()

        if existing:
            mutable = [c for c in self.columns if c not in IMMUTABLE_COLUMNS]
            assignments = ", ".join(f"{c} = ?" for c in mutable)
            await self.db.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                tuple(row[c] for c in mutable) + (entity.id,),
            )
        else:
            placeholders = ", ".join("?" * len(self.columns))
            await self.db.execute(
                f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})",
                tuple(row[c] for c in self.columns),
            )

    async def find_by_id(self, entity_id: str) -> ModelT | None:
        """Find entity by ID.

        Args:
            entity_id: Entity ID

        Returns:
            Entity or None if not found
        """
        rows = await self.db.fetch_all(
            f"SELECT * FROM {self.table} WHERE id = ?", (entity_id,)
        )
        if not rows:
            return None
        return self.row_to_model(rows[0])

    async def find_all(self, profile_id: str | None = None) -> list[ModelT]:
        """List entities, optionally scoped to one profile.

        Args:
            profile_id: Owning profile ID, or None for every profile

        Returns:
            Entities ordered by `order_by`
        """
        return [self.row_to_model(row) for row in await self.fetch_rows(profile_id)]

    async def fetch_rows(self, profile_id: str | None = None) -> list[dict[str, Any]]:
        """Raw column values, without schema validation.

        Used by callers that must survive rows the model would reject.
        """
        if profile_id is None:
            rows = await self.db.fetch_all(
                f"SELECT * FROM {self.table} ORDER BY {self.order_by}"
            )
        else:
            rows = await self.db.fetch_all(
                f"SELECT * FROM {self.table} WHERE profile_id = ? ORDER BY {self.order_by}",
                (profile_id,),
            )
        return [dict(row) for row in rows]

    async def find_by_profile(self, profile_id: str) -> list[ModelT]:
        return await self.find_all(profile_id)

    async def count(self) -> int:
        rows = await self.db.fetch_all(f"SELECT COUNT(*) AS count FROM {self.table}")
        return rows[0]["count"]

    async def delete(self, entity_id: str, use_transaction: bool = True) -> bool:
        """Delete entity by ID.

        Args:
            entity_id: Entity ID
            use_transaction: Open a transaction for this write

        Returns:
            True if deleted, False if not found
        """
        if use_transaction:
            async with self.db.transaction():
                cursor = await self.db.execute(
                    f"DELETE FROM {self.table} WHERE id = ?", (entity_id,)
                )
        else:
            cursor = await self.db.execute(
                f"DELETE FROM {self.table} WHERE id = ?", (entity_id,)
            )
        return cursor.rowcount > 0

    def _to_row(self, entity: ModelT) -> dict[str, Any]:
        """Convert entity to column values."""
        row: dict[str, Any] = {}
        for column in self.columns:
            value = getattr(entity, column)
            if column in self.json_columns:
                value = Database.serialize_json(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, bool):
                value = 1 if value else 0
            row[column] = value
        return row

    def row_to_model(self, row: Any) -> ModelT:
        """Convert database row to entity.

        Raises:
            pydantic.ValidationError: If the stored values violate the schema
        """
        data = dict(row)
        for column in self.json_columns:
            if column in data:
                data[column] = Database.deserialize_json(data[column], default=None)
                if data[column] is None:
                    del data[column]
        return self.model.model_validate(data)  # type: ignore[return-value]
