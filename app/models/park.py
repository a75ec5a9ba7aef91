"""
Park, CheckIn and ParkReview models.

Only the columns the notification fan-out reads are mapped here; park
directory management lives elsewhere.
"""
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, UUIDMixin
from app.utils.datetime_utils import utc_now


class Park(Base, UUIDMixin):
    """Dog park."""

    __tablename__ = "parks"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Park(id={self.id}, name={self.name})>"


class CheckIn(Base, UUIDMixin):
    """A user checking in at a park."""

    __tablename__ = "check_ins"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    park_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("parks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )


class ParkReview(Base, UUIDMixin):
    """Park review; replies point at their parent review."""

    __tablename__ = "park_reviews"

    park_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("parks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("park_reviews.id", ondelete="CASCADE"), nullable=True, index=True
    )
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
