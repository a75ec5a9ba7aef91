"""
Pydantic schemas for message requests and responses.
Handles validation for message-related API endpoints.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.profile import UTCDateTime


class MessageCreate(BaseModel):
    """
    Schema for sending a message.

    Blank content is rejected by the service with a 400 so the client
    gets the same error shape as other validation failures.
    """

    conversation_id: str = Field(..., description="Conversation ID")
    content: str = Field(..., max_length=10000, description="Message text content")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "conversation_id": "123e4567-e89b-12d3-a456-426614174000",
                "content": "Meet at the park at 5?"
            }
        }
    )


class MessageResponse(BaseModel):
    """Schema for a stored message."""

    id: str
    conversation_id: str
    sender_id: str
    content: str
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class MessagePage(BaseModel):
    """
    One page of history, oldest first.

    next_cursor is set when older messages remain; pass it back to
    fetch them.
    """

    messages: List[MessageResponse]
    next_cursor: Optional[str] = None
    has_more: bool = False
