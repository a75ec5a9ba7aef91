"""
Pydantic schemas for friendship requests and responses.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.friendship import FriendshipStatus
from app.schemas.profile import ProfileResponse, UTCDateTime


class FriendRequestCreate(BaseModel):
    """Schema for sending a friend request."""

    addressee_id: str = Field(..., min_length=1, description="Profile to befriend")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"addressee_id": "123e4567-e89b-12d3-a456-426614174000"}
        }
    )


class FriendshipResponse(BaseModel):
    """Schema for a friendship row."""

    id: str
    requester_id: str
    addressee_id: str
    status: FriendshipStatus
    created_at: UTCDateTime
    updated_at: Optional[UTCDateTime] = None
    requester: Optional[ProfileResponse] = None
    addressee: Optional[ProfileResponse] = None

    model_config = ConfigDict(from_attributes=True)


class FriendshipStatusResponse(BaseModel):
    """
    Relationship between the caller and another user.

    pending_sent / pending_received tell the client which side may accept.
    """

    status: Literal["none", "pending_sent", "pending_received", "accepted"]
    friendship: Optional[FriendshipResponse] = None


class FriendListResponse(BaseModel):
    friends: List[ProfileResponse]
    total: int


class FriendRequestListResponse(BaseModel):
    requests: List[FriendshipResponse]
    total: int
