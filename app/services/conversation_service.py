"""
Conversation service containing business logic for conversation operations.
Handles the one-conversation-per-pair registry and conversation listings.
"""
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, PermissionDenied
from app.models.conversation import Conversation
from app.models.message import Message
from app.repositories.conversation_repo import ConversationRepository
from app.repositories.message_repo import MessageRepository
from app.repositories.profile_repo import ProfileRepository
from app.schemas.conversation import ConversationParticipantResponse, ConversationResponse
from app.schemas.message import MessageResponse
from app.services.unread_service import UnreadService
from app.utils.validators import validate_distinct_users

logger = logging.getLogger(__name__)


class ConversationService:
    """Service for conversation operations with business logic."""

    def __init__(self, db: AsyncSession):
        """
        Initialize conversation service.

        Args:
            db: Database session
        """
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = MessageRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.unread_service = UnreadService(db)

    async def get_or_create_conversation(self, user_a: str, user_b: str) -> str:
        """
        Get the conversation between two users, creating it on first contact.

        Idempotent and safe under concurrent calls from either side: every
        caller for the same pair gets the same ID and only one row exists.
        Blocks are not consulted here; they gate sending, not opening.

        Args:
            user_a: One participant
            user_b: The other participant

        Returns:
            Conversation ID

        Raises:
            ValidationFailed: user_a == user_b
            NotFoundError: The other user does not exist
        """
        validate_distinct_users(user_a, user_b, "start a conversation with")

        existing = await self.conversation_repo.get_by_pair(user_a, user_b)
        if existing:
            return existing.id

        if await self.profile_repo.get(user_b) is None:
            raise NotFoundError("User not found")

        created = await self.conversation_repo.insert_pair_if_absent(user_a, user_b)

        conversation = await self.conversation_repo.get_by_pair(user_a, user_b)
        if conversation is None:
            raise ConflictError("Conversation exists but could not be loaded")

        if created:
            logger.info(f"Conversation {conversation.id} created for {user_a} and {user_b}")
        return conversation.id

    def _to_response(
        self,
        conversation: Conversation,
        last_message: Message | None,
        unread_count: int
    ) -> ConversationResponse:
        return ConversationResponse(
            id=conversation.id,
            created_at=conversation.created_at,
            last_message_at=conversation.last_message_at,
            participants=[
                ConversationParticipantResponse.model_validate(p)
                for p in conversation.participants
            ],
            last_message=MessageResponse.model_validate(last_message) if last_message else None,
            unread_count=unread_count,
        )

    async def get_user_conversations(self, user_id: str) -> List[ConversationResponse]:
        """
        List a user's conversations, most recent activity first.

        Each entry carries participants' profiles, the latest message and
        the user's unread count.
        """
        conversations = await self.conversation_repo.get_user_conversations(user_id)
        if not conversations:
            return []

        latest = await self.message_repo.get_latest_for_conversations([c.id for c in conversations])
        unread = await self.unread_service.get_unread_counts(user_id)

        return [
            self._to_response(c, latest.get(c.id), unread.get(c.id, 0))
            for c in conversations
        ]

    async def get_conversation(self, conversation_id: str, viewer_id: str) -> ConversationResponse:
        """
        Get one conversation for a participant.

        Raises:
            NotFoundError: No such conversation
            PermissionDenied: Viewer is not a participant
        """
        conversation = await self.conversation_repo.get_with_participants(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")

        if viewer_id not in conversation.participant_ids():
            raise PermissionDenied("Not a participant in this conversation")

        last_message = await self.message_repo.get_latest(conversation_id)
        unread_count = await self.unread_service.get_unread_count(conversation_id, viewer_id)
        return self._to_response(conversation, last_message, unread_count)
