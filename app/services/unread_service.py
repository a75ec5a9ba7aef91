"""
Unread service.
Counts messages a participant has not seen yet and moves read markers.

A message is unread for a viewer when someone else sent it after the
viewer's last_read_at (every message from the other side counts while
last_read_at is unset). Counts are cached in Redis for a short TTL and
invalidated whenever they change.
"""
import logging
from typing import Dict

from sqlalchemy.ext.asyncio import AsyncSession

from app.core import database
from app.core.cache import (
    cache_total_unread_count,
    cache_unread_count,
    get_cached_total_unread_count,
    get_cached_unread_count,
    invalidate_unread_counts,
)
from app.core.exceptions import PermissionDenied
from app.repositories.conversation_repo import ConversationRepository
from app.repositories.message_repo import MessageRepository
from app.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class UnreadService:
    """Service for unread counts and read markers."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = MessageRepository(db)

    async def get_unread_count(self, conversation_id: str, user_id: str) -> int:
        """
        Unread messages for user_id in one conversation.

        Args:
            conversation_id: Conversation ID
            user_id: Viewer profile ID

        Returns:
            Number of unread messages (0 for non-participants)
        """
        cached = await get_cached_unread_count(user_id, conversation_id)
        if cached is not None:
            return cached

        participant = await self.conversation_repo.get_participant(conversation_id, user_id)
        if participant is None:
            return 0

        count = await self.message_repo.count_unread(
            conversation_id, user_id, participant.last_read_at
        )
        await cache_unread_count(user_id, conversation_id, count)
        return count

    async def get_unread_counts(self, user_id: str) -> Dict[str, int]:
        """Unread count per conversation (conversations with none are omitted)."""
        return await self.message_repo.count_unread_by_conversation(user_id)

    async def get_total_unread(self, user_id: str) -> int:
        """
        Badge total: the sum of per-conversation unread counts.

        Args:
            user_id: Viewer profile ID

        Returns:
            Total unread messages across all conversations
        """
        cached = await get_cached_total_unread_count(user_id)
        if cached is not None:
            return cached

        counts = await self.get_unread_counts(user_id)
        total = sum(counts.values())
        await cache_total_unread_count(user_id, total)
        return total

    async def mark_read(self, conversation_id: str, user_id: str) -> None:
        """
        Set the viewer's read marker to now.

        Raises:
            PermissionDenied: user_id is not a participant
        """
        updated = await self.conversation_repo.set_last_read(conversation_id, user_id, utc_now())
        if not updated:
            raise PermissionDenied("Not a participant in this conversation")

        await invalidate_unread_counts(user_id, conversation_id)

    async def invalidate_for_recipients(self, conversation_id: str, sender_id: str) -> None:
        """Drop cached counts of everyone in the conversation except the sender."""
        for participant_id in await self.conversation_repo.get_participant_ids(conversation_id):
            if participant_id != sender_id:
                await invalidate_unread_counts(participant_id, conversation_id)


async def mark_read_in_background(conversation_id: str, user_id: str) -> None:
    """
    Fire-and-forget read marker update, run after the response is sent.

    Uses its own session because the request's session is closed by
    then. A failure only leaves the badge stale until the next fetch,
    so it is logged rather than raised.
    """
    try:
        async with database.AsyncSessionLocal() as session:
            await UnreadService(session).mark_read(conversation_id, user_id)
            await session.commit()
    except Exception as e:
        logger.warning(
            f"Failed to mark conversation {conversation_id} read for {user_id}: "
            f"{type(e).__name__}: {e}"
        )
