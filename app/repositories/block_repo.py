"""
Block repository for database operations.
Directed block edges between profiles.
"""
from typing import List

from sqlalchemy import select, delete, and_, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user_block import UserBlock
from app.models.profile import Profile
from app.repositories.base import BaseRepository


class BlockRepository(BaseRepository[UserBlock]):
    """Repository for user block database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(UserBlock, db)

    async def get_edges_between(self, user_a: str, user_b: str) -> List[UserBlock]:
        """Get block edges in both directions between two users (0, 1 or 2 rows)."""
        result = await self.db.execute(
            select(UserBlock).where(
                or_(
                    and_(UserBlock.blocker_id == user_a, UserBlock.blocked_id == user_b),
                    and_(UserBlock.blocker_id == user_b, UserBlock.blocked_id == user_a),
                )
            )
        )
        return list(result.scalars().all())

    async def insert_if_absent(self, blocker_id: str, blocked_id: str) -> None:
        """Create the block edge; an existing edge is left as is."""
        stmt = (
            self._insert()
            .values(blocker_id=blocker_id, blocked_id=blocked_id)
            .on_conflict_do_nothing(index_elements=["blocker_id", "blocked_id"])
        )
        await self.db.execute(stmt)
        await self.db.flush()

    async def delete_block(self, blocker_id: str, blocked_id: str) -> bool:
        """
        Remove the block edge.

        Returns:
            True if a row was deleted
        """
        result = await self.db.execute(
            delete(UserBlock).where(
                and_(
                    UserBlock.blocker_id == blocker_id,
                    UserBlock.blocked_id == blocked_id
                )
            )
        )
        await self.db.flush()
        return result.rowcount > 0

    async def get_blocked_profiles(self, blocker_id: str) -> List[Profile]:
        """Profiles blocked by blocker_id, most recently blocked first."""
        result = await self.db.execute(
            select(Profile)
            .join(UserBlock, UserBlock.blocked_id == Profile.id)
            .where(UserBlock.blocker_id == blocker_id)
            .order_by(desc(UserBlock.created_at))
        )
        return list(result.scalars().all())
