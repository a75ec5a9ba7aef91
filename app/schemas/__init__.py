"""
Pydantic schemas for request/response validation.
"""
from app.schemas.profile import ProfileResponse, UTCDateTime
from app.schemas.block import BlockStatus, BlockStatusResponse, BlockedUsersResponse
from app.schemas.friendship import (
    FriendRequestCreate,
    FriendshipResponse,
    FriendshipStatusResponse,
    FriendListResponse,
    FriendRequestListResponse,
)
from app.schemas.message import MessageCreate, MessageResponse, MessagePage
from app.schemas.conversation import (
    ConversationCreate,
    ConversationCreateResponse,
    ConversationParticipantResponse,
    ConversationResponse,
    ConversationListResponse,
    TotalUnreadResponse,
)
from app.schemas.notification import (
    PushMessage,
    PushTicket,
    FanoutResult,
    PushTokenRegister,
    PushTokenResponse,
    NotificationResponse,
    NotificationListResponse,
    UnreadCountResponse,
)

__all__ = [
    "ProfileResponse",
    "UTCDateTime",
    "BlockStatus",
    "BlockStatusResponse",
    "BlockedUsersResponse",
    "FriendRequestCreate",
    "FriendshipResponse",
    "FriendshipStatusResponse",
    "FriendListResponse",
    "FriendRequestListResponse",
    "MessageCreate",
    "MessageResponse",
    "MessagePage",
    "ConversationCreate",
    "ConversationCreateResponse",
    "ConversationParticipantResponse",
    "ConversationResponse",
    "ConversationListResponse",
    "TotalUnreadResponse",
    "PushMessage",
    "PushTicket",
    "FanoutResult",
    "PushTokenRegister",
    "PushTokenResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "UnreadCountResponse",
]
