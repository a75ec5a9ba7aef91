"""
API v1 router exports.
Provides API endpoint routers.
"""
from app.api.v1 import blocks, conversations, friends, hooks, messages, notifications

__all__ = [
    "blocks",
    "conversations",
    "friends",
    "hooks",
    "messages",
    "notifications",
]
