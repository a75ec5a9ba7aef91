"""
SQLAlchemy models for the dog park social server.

All models must be imported here for Alembic auto-generation to work.
"""

# Import Base first
from app.models.base import Base, TimestampMixin, UUIDMixin

# Import all models (order matters for relationships)
from app.models.profile import Profile
from app.models.friendship import Friendship, FriendshipStatus
from app.models.user_block import UserBlock
from app.models.conversation import Conversation, ConversationParticipant, make_pair_key
from app.models.message import Message
from app.models.push_token import PushToken
from app.models.notification import Notification, NotificationType
from app.models.park import Park, CheckIn, ParkReview

# Export all models and enums
__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Profiles
    "Profile",
    # Social graph
    "Friendship",
    "FriendshipStatus",
    "UserBlock",
    # Messaging
    "Conversation",
    "ConversationParticipant",
    "make_pair_key",
    "Message",
    # Notifications
    "PushToken",
    "Notification",
    "NotificationType",
    # Parks
    "Park",
    "CheckIn",
    "ParkReview",
]
