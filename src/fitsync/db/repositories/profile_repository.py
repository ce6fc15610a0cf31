"""Profile repository for database operations."""

from fitsync.db.repositories.base import BaseRepository
from fitsync.models.profile import Profile


class ProfileRepository(BaseRepository[Profile]):
    """Repository for profile operations."""

    table = "profiles"
    model = Profile

    async def find_all(self, profile_id: str | None = None) -> list[Profile]:
        """List profiles, or the single profile matching `profile_id`."""
        if profile_id is None:
            return await super().find_all()
        profile = await self.find_by_id(profile_id)
        return [profile] if profile else []

    async def find_inactive(self) -> list[Profile]:
        rows = await self.db.fetch_all(
            "SELECT * FROM profiles WHERE is_active = 0 ORDER BY created_at"
        )
        return [self.row_to_model(row) for row in rows]
