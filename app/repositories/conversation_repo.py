"""
Conversation repository for database operations.
Handles conversations, participants, and read markers.
"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import select, and_, desc, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.base import canonical_pair, generate_uuid
from app.models.conversation import Conversation, ConversationParticipant, make_pair_key
from app.repositories.base import BaseRepository
from app.utils.datetime_utils import utc_now


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for conversation database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Conversation, db)

    async def get_with_participants(self, conversation_id: str) -> Optional[Conversation]:
        """
        Get conversation with participants and their profiles loaded.

        Args:
            conversation_id: Conversation ID

        Returns:
            Conversation or None
        """
        result = await self.db.execute(
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .options(
                selectinload(Conversation.participants).selectinload(ConversationParticipant.profile)
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_pair(self, user_a: str, user_b: str) -> Optional[Conversation]:
        """Find the conversation for an unordered pair."""
        result = await self.db.execute(
            select(Conversation)
            .where(Conversation.pair_key == make_pair_key(user_a, user_b))
            .options(
                selectinload(Conversation.participants).selectinload(ConversationParticipant.profile)
            )
        )
        return result.scalar_one_or_none()

    async def insert_pair_if_absent(self, user_a: str, user_b: str) -> bool:
        """
        Atomically create the conversation and both participant rows.

        Concurrent callers for the same pair race on the unique pair key;
        exactly one insert wins and the others see no returned row.

        Returns:
            True if this call created the conversation
        """
        low, high = canonical_pair(user_a, user_b)
        conversation_id = generate_uuid()
        now = utc_now()

        stmt = (
            self._insert()
            .values(
                id=conversation_id,
                pair_key=make_pair_key(low, high),
                created_at=now,
                last_message_at=now,
            )
            .on_conflict_do_nothing(index_elements=["pair_key"])
            .returning(Conversation.id)
        )
        try:
            result = await self.db.execute(stmt)
            inserted_id = result.scalar_one_or_none()
        except IntegrityError:
            # Lost the race under a backend that reports it instead of skipping
            await self.db.rollback()
            return False

        if inserted_id is None:
            return False

        participants_stmt = (
            self._insert(ConversationParticipant)
            .values([
                {"conversation_id": inserted_id, "user_id": low, "joined_at": now},
                {"conversation_id": inserted_id, "user_id": high, "joined_at": now},
            ])
            .on_conflict_do_nothing(index_elements=["conversation_id", "user_id"])
        )
        await self.db.execute(participants_stmt)
        await self.db.flush()
        return True

    async def get_user_conversations(self, user_id: str) -> List[Conversation]:
        """
        Conversations the user participates in, most recent activity first.

        Args:
            user_id: Profile ID

        Returns:
            List of conversations with participants loaded
        """
        member_subquery = (
            select(ConversationParticipant.conversation_id)
            .where(ConversationParticipant.user_id == user_id)
        )

        result = await self.db.execute(
            select(Conversation)
            .where(Conversation.id.in_(member_subquery))
            .options(
                selectinload(Conversation.participants).selectinload(ConversationParticipant.profile)
            )
            .order_by(desc(Conversation.last_message_at), desc(Conversation.id))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_participant(
        self, conversation_id: str, user_id: str
    ) -> Optional[ConversationParticipant]:
        """Get the participant row, or None if user_id is not in the conversation."""
        result = await self.db.execute(
            select(ConversationParticipant).where(
                and_(
                    ConversationParticipant.conversation_id == conversation_id,
                    ConversationParticipant.user_id == user_id
                )
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_participant_ids(self, conversation_id: str) -> List[str]:
        """Profile IDs of the conversation's participants."""
        result = await self.db.execute(
            select(ConversationParticipant.user_id).where(
                ConversationParticipant.conversation_id == conversation_id
            )
        )
        return list(result.scalars().all())

    async def set_last_read(
        self, conversation_id: str, user_id: str, read_at: datetime
    ) -> bool:
        """
        Move the participant's read marker.

        Returns:
            True if a participant row was updated
        """
        result = await self.db.execute(
            update(ConversationParticipant)
            .where(
                and_(
                    ConversationParticipant.conversation_id == conversation_id,
                    ConversationParticipant.user_id == user_id
                )
            )
            .values(last_read_at=read_at)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount > 0

    async def touch_last_message_at(self, conversation_id: str, at: datetime) -> None:
        """Record the time of the newest message."""
        await self.db.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(last_message_at=at)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
