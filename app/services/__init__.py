"""
Service layer containing business logic.
Services orchestrate repositories and enforce the social rules.
"""
from app.services.block_service import BlockService
from app.services.conversation_service import ConversationService
from app.services.fanout_service import NotificationFanoutService
from app.services.friendship_service import FriendshipService
from app.services.message_service import MessageService
from app.services.notification_service import NotificationService
from app.services.unread_service import UnreadService, mark_read_in_background

__all__ = [
    "BlockService",
    "ConversationService",
    "NotificationFanoutService",
    "FriendshipService",
    "MessageService",
    "NotificationService",
    "UnreadService",
    "mark_read_in_background",
]
