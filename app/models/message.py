"""
Message model.

Messages are append-only: once written they are never edited or
deleted. Within a conversation they are totally ordered by
(created_at, id).
"""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, UUIDMixin
from app.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from app.models.profile import Profile


class Message(Base, UUIDMixin):
    """Message model for direct messages."""

    __tablename__ = "messages"

    conversation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        doc="Conversation this message belongs to"
    )

    sender_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Profile that sent the message"
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Message text"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        doc="When the message was sent"
    )

    sender: Mapped["Profile"] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, conversation_id={self.conversation_id}, sender_id={self.sender_id})>"


# Cursor pagination: (conversation_id, created_at DESC, id DESC)
Index(
    "idx_messages_conversation_created_id",
    Message.conversation_id,
    Message.created_at.desc(),
    Message.id.desc(),
)
