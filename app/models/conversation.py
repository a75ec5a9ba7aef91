"""
Conversation and ConversationParticipant models.

Conversations are 1-to-1 direct message threads. Each unordered pair of
profiles owns at most one conversation, enforced by a unique pair key.
"""
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, UUIDMixin, canonical_pair
from app.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from app.models.profile import Profile


def make_pair_key(user_a: str, user_b: str) -> str:
    """Canonical key for an unordered participant pair ("low:high")."""
    low, high = canonical_pair(user_a, user_b)
    return f"{low}:{high}"


class Conversation(Base, UUIDMixin):
    """
    Conversation model for direct messages.

    Created lazily on first contact and never deleted.
    """

    __tablename__ = "conversations"

    pair_key: Mapped[str] = mapped_column(
        String(80),
        unique=True,
        nullable=False,
        doc="Sorted participant pair, unique per conversation"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        doc="When the conversation was created"
    )

    last_message_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        doc="Timestamp of the latest message (creation time if empty)"
    )

    participants: Mapped[List["ConversationParticipant"]] = relationship(
        back_populates="conversation",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    def participant_ids(self) -> List[str]:
        return [p.user_id for p in self.participants]

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id}, pair_key={self.pair_key})>"


class ConversationParticipant(Base):
    """
    ConversationParticipant model - association between profiles and conversations.

    Tracks the read marker used for unread accounting.
    """

    __tablename__ = "conversation_participants"

    conversation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Conversation ID"
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Participant profile ID"
    )

    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        doc="When the participant was added"
    )

    last_read_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Last time the participant opened the conversation"
    )

    conversation: Mapped["Conversation"] = relationship(back_populates="participants")
    profile: Mapped["Profile"] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<ConversationParticipant(conversation_id={self.conversation_id}, "
            f"user_id={self.user_id})>"
        )


# Indexes for performance
Index("idx_conversation_participants_user", ConversationParticipant.user_id)
Index("idx_conversations_last_message_at", Conversation.last_message_at)
