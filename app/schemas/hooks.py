"""
Database webhook payloads.

Each hook receives the freshly inserted row, either bare or wrapped as
{"record": row}. Extra columns are ignored.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class _HookRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")


class MessageRecord(_HookRecord):
    """Inserted messages row."""

    id: Optional[str] = None
    conversation_id: str = Field(..., min_length=1)
    sender_id: str = Field(..., min_length=1)
    content: str


class CheckInRecord(_HookRecord):
    """Inserted check_ins row."""

    id: Optional[str] = None
    user_id: str = Field(..., min_length=1)
    park_id: str = Field(..., min_length=1)


class ReviewReplyRecord(_HookRecord):
    """A park review reply, identified by the reply and its parent."""

    reply_id: str = Field(..., min_length=1)
    parent_id: str = Field(..., min_length=1)
    replier_id: str = Field(..., min_length=1)
    park_id: str = Field(..., min_length=1)


def unwrap_record(payload: Any) -> Dict[str, Any]:
    """Return the row from a webhook body (bare row or {"record": row})."""
    if isinstance(payload, dict) and isinstance(payload.get("record"), dict):
        return payload["record"]
    return payload if isinstance(payload, dict) else {}
