"""
Pydantic schemas for user blocks.
"""
import enum
from typing import List

from pydantic import BaseModel

from app.schemas.profile import ProfileResponse


class BlockStatus(str, enum.Enum):
    """Block relation as seen from the caller."""
    NONE = "none"
    BLOCKED = "blocked"
    BLOCKED_BY = "blocked_by"


class BlockStatusResponse(BaseModel):
    user_id: str
    status: BlockStatus


class BlockedUsersResponse(BaseModel):
    users: List[ProfileResponse]
    total: int
