"""
Park repository for database operations.
Read-only lookups of parks and park reviews.
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.park import Park, ParkReview
from app.repositories.base import BaseRepository


class ParkRepository(BaseRepository[Park]):
    """Repository for park database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Park, db)

    async def get_review(self, review_id: str) -> Optional[ParkReview]:
        """Get a park review by ID."""
        result = await self.db.execute(
            select(ParkReview).where(ParkReview.id == review_id)
        )
        return result.scalar_one_or_none()
