"""
Notification schemas.
Covers push gateway payloads, fan-out results, push token registration
and the in-app notification inbox.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.notification import NotificationType
from app.schemas.profile import UTCDateTime


# ============================================================================
# Push gateway
# ============================================================================

class PushMessage(BaseModel):
    """One push notification addressed to one device token."""

    to: str = Field(..., description="Device push token")
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
    sound: Optional[str] = "default"
    channel_id: Optional[str] = Field(None, serialization_alias="channelId")

    def to_gateway(self) -> Dict[str, Any]:
        """Serialize in the gateway's wire format (camelCase, no nulls)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PushTicket(BaseModel):
    """Gateway acknowledgement for a single token."""

    token: str
    status: str = Field(..., description="'ok' or 'error'")
    id: Optional[str] = None
    message: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class FanoutResult(BaseModel):
    """
    Outcome of one fan-out invocation.

    - sent: a batch was submitted (individual tokens may still have failed)
    - skipped: nothing to do (invalid payload, no recipients, no tokens, ...)
    - failed: the gateway call itself failed
    """

    status: Literal["sent", "skipped", "failed"]
    reason: Optional[str] = None
    recipients: int = 0
    tokens: int = 0
    delivered: int = 0
    failed_tokens: List[str] = Field(default_factory=list)

    @classmethod
    def skipped(cls, reason: str, **kwargs) -> "FanoutResult":
        return cls(status="skipped", reason=reason, **kwargs)


# ============================================================================
# Push tokens
# ============================================================================

class PushTokenRegister(BaseModel):
    """Schema for registering a device push token."""

    token: str = Field(..., min_length=1, max_length=255)
    platform: Optional[Literal["ios", "android", "web"]] = None

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Token cannot be empty")
        return v.strip()


class PushTokenResponse(BaseModel):
    id: str
    user_id: str
    token: str
    platform: Optional[str] = None
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# In-app notifications
# ============================================================================

class NotificationResponse(BaseModel):
    """Schema for an in-app notification."""

    id: str
    user_id: str
    type: NotificationType
    data: Dict[str, Any] = Field(default_factory=dict)
    read: bool
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
    has_more: bool = False


class UnreadCountResponse(BaseModel):
    unread_count: int
