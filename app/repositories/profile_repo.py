"""
Profile repository for database operations.
Handles profile lookups used by social and notification features.
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile
from app.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Repository for profile database operations."""

    def __init__(self, db: AsyncSession):
        """Initialize profile repository."""
        super().__init__(Profile, db)

    async def get_display_name(self, user_id: str) -> Optional[str]:
        """
        Get a profile's display name.

        Args:
            user_id: Profile ID

        Returns:
            Display name, or None if the profile is missing or unnamed
        """
        result = await self.db.execute(
            select(Profile.display_name).where(Profile.id == user_id)
        )
        return result.scalar_one_or_none()

