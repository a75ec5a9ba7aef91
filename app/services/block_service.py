"""
Block service containing business logic for user blocks.
Answers whether two users may interact and manages block edges.
"""
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.profile import Profile
from app.repositories.block_repo import BlockRepository
from app.repositories.profile_repo import ProfileRepository
from app.schemas.block import BlockStatus
from app.utils.validators import validate_distinct_users

logger = logging.getLogger(__name__)


class BlockService:
    """Service for user block operations."""

    def __init__(self, db: AsyncSession):
        """
        Initialize block service.

        Args:
            db: Database session
        """
        self.db = db
        self.block_repo = BlockRepository(db)
        self.profile_repo = ProfileRepository(db)

    async def get_block_status(self, self_id: str, other_id: str) -> BlockStatus:
        """
        Block relation from self_id's point of view.

        When both users blocked each other, BLOCKED wins: the caller's
        own block is the one they can act on.

        Args:
            self_id: Viewer profile ID
            other_id: Other profile ID

        Returns:
            BlockStatus.NONE, BLOCKED (self blocked other) or BLOCKED_BY
        """
        edges = await self.block_repo.get_edges_between(self_id, other_id)

        if any(e.blocker_id == self_id for e in edges):
            return BlockStatus.BLOCKED
        if any(e.blocker_id == other_id for e in edges):
            return BlockStatus.BLOCKED_BY
        return BlockStatus.NONE

    async def is_blocked_pair(self, user_a: str, user_b: str) -> bool:
        """True if a block exists in either direction."""
        edges = await self.block_repo.get_edges_between(user_a, user_b)
        return len(edges) > 0

    async def block_user(self, blocker_id: str, blocked_id: str) -> None:
        """
        Block another user. Blocking twice is a no-op.

        Existing friendships and conversations are left alone; the block
        only gates future requests and messages.

        Raises:
            ValidationFailed: If a user tries to block themselves
            NotFoundError: If the user to block does not exist
        """
        validate_distinct_users(blocker_id, blocked_id, "block")
        if await self.profile_repo.get(blocked_id) is None:
            raise NotFoundError("User not found")
        await self.block_repo.insert_if_absent(blocker_id, blocked_id)
        logger.info(f"User {blocker_id} blocked {blocked_id}")

    async def unblock_user(self, blocker_id: str, blocked_id: str) -> None:
        """
        Remove a block created by blocker_id.

        Raises:
            NotFoundError: If no such block exists
        """
        removed = await self.block_repo.delete_block(blocker_id, blocked_id)
        if not removed:
            raise NotFoundError("Block not found")
        logger.info(f"User {blocker_id} unblocked {blocked_id}")

    async def get_blocked_users(self, blocker_id: str) -> List[Profile]:
        return await self.block_repo.get_blocked_profiles(blocker_id)
