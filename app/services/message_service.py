"""
Message service containing business logic for message operations.
Handles sending and history paging.
"""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import BlockedError, NotFoundError, PermissionDenied, ValidationFailed
from app.models.message import Message
from app.repositories.conversation_repo import ConversationRepository
from app.repositories.message_repo import MessageRepository
from app.schemas.message import MessagePage, MessageResponse
from app.services.block_service import BlockService
from app.services.unread_service import UnreadService
from app.utils.datetime_utils import utc_now
from app.utils.pagination import decode_cursor, encode_cursor
from app.utils.validators import validate_message_content

logger = logging.getLogger(__name__)


class MessageService:
    """Service for message operations with business logic."""

    def __init__(self, db: AsyncSession):
        """
        Initialize message service.

        Args:
            db: Database session
        """
        self.db = db
        self.message_repo = MessageRepository(db)
        self.conversation_repo = ConversationRepository(db)
        self.block_service = BlockService(db)
        self.unread_service = UnreadService(db)

    async def _get_participant_ids(self, conversation_id: str, user_id: str) -> List[str]:
        """
        Participants of a conversation the user belongs to.

        Raises:
            NotFoundError: No such conversation
            PermissionDenied: user_id is not a participant
        """
        participant_ids = await self.conversation_repo.get_participant_ids(conversation_id)
        if not participant_ids:
            conversation = await self.conversation_repo.get(conversation_id)
            if conversation is None:
                raise NotFoundError("Conversation not found")

        if user_id not in participant_ids:
            raise PermissionDenied("Not a participant in this conversation")

        return participant_ids

    async def send_message(self, conversation_id: str, sender_id: str, content: str) -> Message:
        """
        Append a message to a conversation.

        Args:
            conversation_id: Target conversation
            sender_id: Sending participant
            content: Message text

        Returns:
            Stored message

        Raises:
            ValidationFailed: Empty or whitespace-only content
            NotFoundError: No such conversation
            PermissionDenied: Sender is not a participant
            BlockedError: Either side has blocked the other, even if they
                are friends
        """
        validate_message_content(content)

        participant_ids = await self._get_participant_ids(conversation_id, sender_id)

        for other_id in participant_ids:
            if other_id == sender_id:
                continue
            if await self.block_service.is_blocked_pair(sender_id, other_id):
                logger.info(f"Blocked send from {sender_id} in conversation {conversation_id}")
                raise BlockedError("You can no longer send messages in this conversation")

        now = utc_now()
        message = await self.message_repo.create(
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            created_at=now,
        )

        await self.conversation_repo.touch_last_message_at(conversation_id, now)
        await self.unread_service.invalidate_for_recipients(conversation_id, sender_id)

        logger.debug(f"Message {message.id} stored in conversation {conversation_id}")
        return message

    async def load_more(
        self,
        conversation_id: str,
        viewer_id: str,
        cursor: Optional[str] = None,
        page_size: Optional[int] = None
    ) -> MessagePage:
        """
        Load the next older page of history.

        Pages are fetched newest-first and returned oldest-first, so
        prepending successive pages rebuilds the full history without
        gaps or duplicates. History stays readable after a block.

        Args:
            conversation_id: Conversation to read
            viewer_id: Reading participant
            cursor: next_cursor of the previous page, None for the newest page
            page_size: Messages per page (defaults to settings.message_page_size)

        Returns:
            MessagePage

        Raises:
            ValidationFailed: Bad cursor or page size out of range
            NotFoundError: No such conversation
            PermissionDenied: Viewer is not a participant
        """
        page_size = page_size if page_size is not None else settings.message_page_size
        if page_size < 1 or page_size > settings.max_page_size:
            raise ValidationFailed(
                f"Page size must be between 1 and {settings.max_page_size}",
                reason="invalid_page_size",
            )

        before = decode_cursor(cursor) if cursor else None

        await self._get_participant_ids(conversation_id, viewer_id)

        messages, has_more = await self.message_repo.get_page_before(
            conversation_id, page_size, before=before
        )
        messages.reverse()

        next_cursor = None
        if has_more and messages:
            oldest = messages[0]
            next_cursor = encode_cursor(oldest.created_at, oldest.id)

        return MessagePage(
            messages=[MessageResponse.model_validate(m) for m in messages],
            next_cursor=next_cursor,
            has_more=has_more,
        )
