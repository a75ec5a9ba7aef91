"""
Repository layer for database operations.
Provides data access abstraction following the Repository pattern.
"""
from app.repositories.base import BaseRepository
from app.repositories.block_repo import BlockRepository
from app.repositories.conversation_repo import ConversationRepository
from app.repositories.friendship_repo import FriendshipRepository
from app.repositories.message_repo import MessageRepository
from app.repositories.notification_repo import NotificationRepository, PushTokenRepository
from app.repositories.park_repo import ParkRepository
from app.repositories.profile_repo import ProfileRepository

__all__ = [
    "BaseRepository",
    "BlockRepository",
    "ConversationRepository",
    "FriendshipRepository",
    "MessageRepository",
    "NotificationRepository",
    "PushTokenRepository",
    "ParkRepository",
    "ProfileRepository",
]
