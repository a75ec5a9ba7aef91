"""
Pydantic schemas for conversation requests and responses.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.message import MessageResponse
from app.schemas.profile import ProfileResponse, UTCDateTime


class ConversationCreate(BaseModel):
    """Schema for opening a direct conversation with another user."""

    user_id: str = Field(..., min_length=1, description="The other participant")


class ConversationCreateResponse(BaseModel):
    id: str


class ConversationParticipantResponse(BaseModel):
    """Schema for a conversation participant."""

    user_id: str
    last_read_at: Optional[UTCDateTime] = None
    profile: Optional[ProfileResponse] = None

    model_config = ConfigDict(from_attributes=True)


class ConversationResponse(BaseModel):
    """Conversation with participants, latest message and viewer's unread count."""

    id: str
    created_at: UTCDateTime
    last_message_at: UTCDateTime
    participants: List[ConversationParticipantResponse] = Field(default_factory=list)
    last_message: Optional[MessageResponse] = None
    unread_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class ConversationListResponse(BaseModel):
    conversations: List[ConversationResponse]
    total: int


class TotalUnreadResponse(BaseModel):
    """Badge total across all conversations."""

    unread_count: int
