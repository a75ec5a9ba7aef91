"""
Custom validators for application data.
Provides reusable validation functions.
"""
from app.core.exceptions import ValidationFailed


def validate_message_content(content: str) -> str:
    """
    Validate message text.

    Args:
        content: Raw message text

    Returns:
        The text unchanged

    Raises:
        ValidationFailed: If the text is empty or whitespace only
    """
    if content is None or not content.strip():
        raise ValidationFailed("Message content cannot be empty", reason="empty_content")
    return content


def validate_distinct_users(user_id: str, other_user_id: str, action: str) -> None:
    """
    Reject operations a user attempts on themselves.

    Raises:
        ValidationFailed: If both IDs are equal
    """
    if user_id == other_user_id:
        raise ValidationFailed(f"Cannot {action} yourself", reason="self_target")
