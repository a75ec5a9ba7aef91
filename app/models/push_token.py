"""
PushToken model.

Each device a user signs in on registers its own token; every token is
an independent delivery target.
"""
from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, UUIDMixin, TimestampMixin


class PushToken(Base, UUIDMixin, TimestampMixin):
    """Push token registered by a user's device."""

    __tablename__ = "push_tokens"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Owner of the device"
    )

    token: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        doc="Opaque device token understood by the push gateway"
    )

    platform: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        doc="ios, android or web"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "token", name="uq_push_tokens_user_token"),
    )

    def __repr__(self) -> str:
        return f"<PushToken(user_id={self.user_id}, platform={self.platform})>"
