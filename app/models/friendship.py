"""
Friendship model.

A friendship is a request/accept relation between two profiles. The
pair is also stored in canonical (sorted) order so the database can
enforce a single row per unordered pair, whichever side asked first.
"""
import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, UUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.profile import Profile


class FriendshipStatus(str, enum.Enum):
    """Lifecycle states of a friendship row. Declined/removed rows are deleted."""
    PENDING = "pending"
    ACCEPTED = "accepted"


class Friendship(Base, UUIDMixin, TimestampMixin):
    """
    Friendship model.

    - requester_id: profile that sent the request
    - addressee_id: profile that must accept it
    - user_low_id / user_high_id: the same pair sorted by ID (uniqueness key)
    """

    __tablename__ = "friendships"

    requester_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        doc="Profile that sent the request"
    )

    addressee_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        doc="Profile the request was sent to"
    )

    user_low_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        doc="Smaller of the two profile IDs"
    )

    user_high_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        doc="Larger of the two profile IDs"
    )

    status: Mapped[FriendshipStatus] = mapped_column(
        SQLEnum(FriendshipStatus, name="friendship_status", native_enum=False,
                values_callable=lambda e: [m.value for m in e]),
        default=FriendshipStatus.PENDING,
        nullable=False,
        doc="pending or accepted"
    )

    requester: Mapped["Profile"] = relationship(foreign_keys=[requester_id], lazy="selectin")
    addressee: Mapped["Profile"] = relationship(foreign_keys=[addressee_id], lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_friendships_pair"),
        CheckConstraint("requester_id <> addressee_id", name="ck_friendships_not_self"),
    )

    def involves(self, user_id: str) -> bool:
        """Check whether the profile is one side of this friendship."""
        return user_id in (self.requester_id, self.addressee_id)

    def other_party(self, user_id: str) -> str:
        """Return the ID of the side that is not user_id."""
        return self.addressee_id if user_id == self.requester_id else self.requester_id

    def __repr__(self) -> str:
        return (
            f"<Friendship(id={self.id}, requester_id={self.requester_id}, "
            f"addressee_id={self.addressee_id}, status={self.status})>"
        )


# Indexes for performance
Index("idx_friendships_requester", Friendship.requester_id, Friendship.status)
Index("idx_friendships_addressee", Friendship.addressee_id, Friendship.status)
