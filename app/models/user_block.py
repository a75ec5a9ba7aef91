"""
UserBlock model for user blocking functionality.

A block is a directed edge. It stops new friend requests and new
messages between the pair in either direction, but leaves existing
friendships, conversations and messages untouched.
"""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from app.models.profile import Profile


class UserBlock(Base):
    """UserBlock model - current block state only, no history."""

    __tablename__ = "user_blocks"

    # Composite primary key
    blocker_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
        doc="User who is blocking"
    )

    blocked_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
        doc="User who is being blocked"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        doc="When the block was created"
    )

    blocked: Mapped["Profile"] = relationship(foreign_keys=[blocked_id], lazy="selectin")

    __table_args__ = (
        CheckConstraint("blocker_id <> blocked_id", name="ck_user_blocks_not_self"),
    )

    def __repr__(self) -> str:
        return f"<UserBlock(blocker_id={self.blocker_id}, blocked_id={self.blocked_id})>"


# Reverse-direction lookups
Index("idx_user_blocks_blocked", UserBlock.blocked_id)
