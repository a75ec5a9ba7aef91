"""
Profile model - public identity of an app user.

Profiles are keyed by the auth provider's user ID. They are owned by
the user and readable by everyone.
"""
from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, UUIDMixin
from app.utils.datetime_utils import utc_now


class Profile(Base, UUIDMixin):
    """Profile model - display name and avatar for a user."""

    __tablename__ = "profiles"

    display_name: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        doc="Name shown to other users"
    )

    avatar_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        doc="Profile picture URL"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        doc="When the profile was created"
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, display_name={self.display_name})>"
