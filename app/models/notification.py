"""
In-app notification model.

Rows are written by social actions (friend requests, acceptances) and
listed in the app's notification inbox.
"""
import enum

from sqlalchemy import Boolean, ForeignKey, Index, JSON, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, UUIDMixin, TimestampMixin


class NotificationType(str, enum.Enum):
    """Kinds of in-app notifications."""
    FRIEND_REQUEST = "friend_request"
    FRIEND_ACCEPTED = "friend_accepted"
    FRIEND_CHECKIN = "friend_checkin"
    REVIEW_REPLY = "review_reply"
    NEW_MESSAGE = "new_message"


class Notification(Base, UUIDMixin, TimestampMixin):
    """Notification addressed to a single recipient."""

    __tablename__ = "notifications"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        doc="Recipient profile ID"
    )

    type: Mapped[NotificationType] = mapped_column(
        SQLEnum(NotificationType, name="notification_type", native_enum=False,
                values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        doc="Notification kind"
    )

    data: Mapped[dict] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        doc="Type-specific payload (actor, target IDs, ...)"
    )

    read: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        doc="Whether the recipient has seen it"
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type})>"


Index("idx_notifications_user_created", Notification.user_id, Notification.created_at.desc())
