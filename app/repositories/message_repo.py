"""
Message repository for database operations.
Handles message history paging and unread counting.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, func, and_, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.conversation import ConversationParticipant
from app.models.message import Message
from app.repositories.base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    """Repository for message database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    async def get_page_before(
        self,
        conversation_id: str,
        limit: int,
        before: Optional[Tuple[datetime, str]] = None
    ) -> Tuple[List[Message], bool]:
        """
        Get one page of messages older than a position, newest first.

        Ordering is (created_at DESC, id DESC) so equal timestamps still
        have a single, stable order across page boundaries.

        Args:
            conversation_id: Conversation ID
            limit: Page size
            before: Exclusive (created_at, id) upper bound, None for the newest page

        Returns:
            Tuple of (messages newest-first, has_more)
        """
        query = select(Message).where(Message.conversation_id == conversation_id)

        if before is not None:
            cursor_at, cursor_id = before
            query = query.where(
                or_(
                    Message.created_at < cursor_at,
                    and_(
                        Message.created_at == cursor_at,
                        Message.id < cursor_id
                    )
                )
            )

        query = query.order_by(desc(Message.created_at), desc(Message.id)).limit(limit + 1)

        result = await self.db.execute(query)
        messages = list(result.scalars().all())

        has_more = len(messages) > limit
        if has_more:
            messages = messages[:limit]

        return messages, has_more

    async def get_latest(self, conversation_id: str) -> Optional[Message]:
        """Newest message of a conversation, if any."""
        result = await self.db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(desc(Message.created_at), desc(Message.id))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_latest_for_conversations(self, conversation_ids: List[str]) -> Dict[str, Message]:
        """
        Newest message per conversation.

        Returns:
            Mapping of conversation ID to its latest message (empty
            conversations are absent)
        """
        if not conversation_ids:
            return {}

        ranked = (
            select(
                Message.id.label("message_id"),
                func.row_number().over(
                    partition_by=Message.conversation_id,
                    order_by=(desc(Message.created_at), desc(Message.id))
                ).label("rn")
            )
            .where(Message.conversation_id.in_(conversation_ids))
            .subquery()
        )

        result = await self.db.execute(
            select(Message)
            .join(ranked, ranked.c.message_id == Message.id)
            .where(ranked.c.rn == 1)
        )
        return {message.conversation_id: message for message in result.scalars().all()}

    async def count_unread(
        self,
        conversation_id: str,
        user_id: str,
        last_read_at: Optional[datetime]
    ) -> int:
        """
        Count messages from the other side newer than the read marker.

        Args:
            conversation_id: Conversation ID
            user_id: Viewer profile ID
            last_read_at: Viewer's read marker (None counts everything)

        Returns:
            Number of unread messages
        """
        conditions = [
            Message.conversation_id == conversation_id,
            Message.sender_id != user_id,
        ]
        if last_read_at is not None:
            conditions.append(Message.created_at > last_read_at)

        result = await self.db.execute(
            select(func.count()).select_from(Message).where(and_(*conditions))
        )
        return result.scalar() or 0

    async def count_unread_by_conversation(self, user_id: str) -> Dict[str, int]:
        """
        Unread counts for every conversation the user participates in.

        Returns:
            Mapping of conversation ID to unread count (zero counts omitted)
        """
        query = (
            select(Message.conversation_id, func.count(Message.id))
            .join(
                ConversationParticipant,
                and_(
                    ConversationParticipant.conversation_id == Message.conversation_id,
                    ConversationParticipant.user_id == user_id
                )
            )
            .where(
                and_(
                    Message.sender_id != user_id,
                    or_(
                        ConversationParticipant.last_read_at.is_(None),
                        Message.created_at > ConversationParticipant.last_read_at
                    )
                )
            )
            .group_by(Message.conversation_id)
        )

        result = await self.db.execute(query)
        return {conversation_id: count for conversation_id, count in result.all()}
