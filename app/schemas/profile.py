"""
Profile schemas shared by the social endpoints.
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict

from app.utils.datetime_utils import ensure_utc

# SQLite returns naive timestamps; responses always carry UTC
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


class ProfileResponse(BaseModel):
    """Public profile of a user."""

    id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
