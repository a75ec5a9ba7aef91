"""
Friendship repository for database operations.
Handles friendship rows and accepted-friend lookups.
"""
from typing import List, Optional

from sqlalchemy import select, and_, or_, desc, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import canonical_pair, generate_uuid
from app.models.friendship import Friendship, FriendshipStatus
from app.models.profile import Profile
from app.repositories.base import BaseRepository
from app.utils.datetime_utils import utc_now


class FriendshipRepository(BaseRepository[Friendship]):
    """Repository for friendship database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Friendship, db)

    async def get_for_pair(self, user_a: str, user_b: str) -> Optional[Friendship]:
        """
        Get the friendship row for an unordered pair.

        Args:
            user_a: One profile ID
            user_b: The other profile ID

        Returns:
            Friendship or None
        """
        low, high = canonical_pair(user_a, user_b)
        result = await self.db.execute(
            select(Friendship).where(
                and_(
                    Friendship.user_low_id == low,
                    Friendship.user_high_id == high
                )
            )
        )
        return result.scalar_one_or_none()

    async def insert_if_absent(self, requester_id: str, addressee_id: str) -> bool:
        """
        Atomically create a pending request unless the pair already has a row.

        The unique constraint on (user_low_id, user_high_id) decides the
        winner when both sides send at the same time.

        Returns:
            True if this call inserted the row
        """
        low, high = canonical_pair(requester_id, addressee_id)
        now = utc_now()
        stmt = (
            self._insert()
            .values(
                id=generate_uuid(),
                requester_id=requester_id,
                addressee_id=addressee_id,
                user_low_id=low,
                user_high_id=high,
                status=FriendshipStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["user_low_id", "user_high_id"])
            .returning(Friendship.id)
        )
        result = await self.db.execute(stmt)
        inserted_id = result.scalar_one_or_none()
        await self.db.flush()
        return inserted_id is not None

    async def mark_accepted(self, friendship_id: str) -> bool:
        """
        Transition a pending row to accepted.

        Returns:
            True if a pending row was updated
        """
        result = await self.db.execute(
            update(Friendship)
            .where(
                and_(
                    Friendship.id == friendship_id,
                    Friendship.status == FriendshipStatus.PENDING
                )
            )
            .values(status=FriendshipStatus.ACCEPTED, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount > 0

    async def refresh(self, friendship: Friendship) -> Friendship:
        """Reload a row (and its profiles) after a bulk update."""
        result = await self.db.execute(
            select(Friendship)
            .where(Friendship.id == friendship.id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def get_pending_received(self, user_id: str) -> List[Friendship]:
        """Pending requests addressed to user_id, newest first."""
        result = await self.db.execute(
            select(Friendship)
            .where(
                and_(
                    Friendship.addressee_id == user_id,
                    Friendship.status == FriendshipStatus.PENDING
                )
            )
            .order_by(desc(Friendship.created_at))
        )
        return list(result.scalars().all())

    async def get_pending_sent(self, user_id: str) -> List[Friendship]:
        """Pending requests sent by user_id, newest first."""
        result = await self.db.execute(
            select(Friendship)
            .where(
                and_(
                    Friendship.requester_id == user_id,
                    Friendship.status == FriendshipStatus.PENDING
                )
            )
            .order_by(desc(Friendship.created_at))
        )
        return list(result.scalars().all())

    async def get_friend_ids(self, user_id: str) -> List[str]:
        """
        IDs of accepted friends (single hop only).

        Args:
            user_id: Profile ID

        Returns:
            List of friend profile IDs
        """
        result = await self.db.execute(
            select(Friendship.requester_id, Friendship.addressee_id).where(
                and_(
                    or_(
                        Friendship.requester_id == user_id,
                        Friendship.addressee_id == user_id
                    ),
                    Friendship.status == FriendshipStatus.ACCEPTED
                )
            )
        )
        return [
            addressee if requester == user_id else requester
            for requester, addressee in result.all()
        ]

    async def get_friend_profiles(self, user_id: str) -> List[Profile]:
        """Accepted friends' profiles ordered by display name."""
        friend_ids = await self.get_friend_ids(user_id)
        if not friend_ids:
            return []

        result = await self.db.execute(
            select(Profile)
            .where(Profile.id.in_(friend_ids))
            .order_by(Profile.display_name)
        )
        return list(result.scalars().all())

    async def get_recent_accepted(self, user_id: str, limit: int = 10) -> List[Friendship]:
        """Most recently accepted friendships involving user_id."""
        result = await self.db.execute(
            select(Friendship)
            .where(
                and_(
                    or_(
                        Friendship.requester_id == user_id,
                        Friendship.addressee_id == user_id
                    ),
                    Friendship.status == FriendshipStatus.ACCEPTED
                )
            )
            .order_by(desc(Friendship.updated_at))
            .limit(limit)
        )
        return list(result.scalars().all())
