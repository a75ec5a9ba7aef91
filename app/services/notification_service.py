"""
Notification service for business logic.
Handles the in-app notification inbox and device push token registration.
"""
from typing import Any, Dict, Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.notification import Notification, NotificationType
from app.models.push_token import PushToken
from app.repositories.notification_repo import NotificationRepository, PushTokenRepository
from app.schemas.notification import NotificationListResponse, NotificationResponse

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for notification-related business logic."""

    def __init__(self, db: AsyncSession):
        """Initialize notification service."""
        self.db = db
        self.notification_repo = NotificationRepository(db)
        self.push_token_repo = PushTokenRepository(db)

    async def notify(
        self,
        user_id: str,
        type: NotificationType,
        data: Optional[Dict[str, Any]] = None
    ) -> Notification:
        """
        Record an in-app notification for a recipient.

        Args:
            user_id: Recipient profile ID
            type: Notification kind
            data: Type-specific payload

        Returns:
            Created notification
        """
        notification = await self.notification_repo.create_notification(
            user_id=user_id, type=type, data=data or {}
        )
        logger.debug(f"Notification {type.value} recorded for user {user_id}")
        return notification

    async def list_notifications(
        self,
        user_id: str,
        limit: int = 20,
        unread_only: bool = False
    ) -> NotificationListResponse:
        """
        Get a user's notifications, newest first, with the unread total.

        Args:
            user_id: Recipient profile ID
            limit: Maximum notifications to return
            unread_only: Only unread notifications

        Returns:
            NotificationListResponse
        """
        notifications, has_more = await self.notification_repo.list_for_user(
            user_id, limit=limit, unread_only=unread_only
        )
        unread_count = await self.notification_repo.count_unread(user_id)

        return NotificationListResponse(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            unread_count=unread_count,
            has_more=has_more,
        )

    async def get_unread_count(self, user_id: str) -> int:
        return await self.notification_repo.count_unread(user_id)

    async def mark_as_read(self, notification_id: str, user_id: str) -> None:
        """
        Mark one notification as read.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else
        """
        if not await self.notification_repo.mark_read(notification_id, user_id):
            raise NotFoundError("Notification not found")

    async def mark_all_as_read(self, user_id: str) -> int:
        updated = await self.notification_repo.mark_all_read(user_id)
        logger.info(f"Marked {updated} notifications read for user {user_id}")
        return updated

    async def delete_notification(self, notification_id: str, user_id: str) -> None:
        """
        Delete one of the user's notifications.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else
        """
        if not await self.notification_repo.delete_for_user(notification_id, user_id):
            raise NotFoundError("Notification not found")

    async def register_push_token(
        self,
        user_id: str,
        token: str,
        platform: Optional[str] = None
    ) -> PushToken:
        """
        Register (or refresh) a device push token.

        A user may have several devices; each token is kept separately.
        """
        push_token = await self.push_token_repo.upsert(user_id, token, platform)
        logger.info(f"Push token registered for user {user_id} ({platform or 'unknown'})")
        return push_token

    async def remove_push_token(self, user_id: str, token: str) -> None:
        """
        Unregister a device token (sign-out on that device).

        Raises:
            NotFoundError: If the user has no such token
        """
        if not await self.push_token_repo.remove(user_id, token):
            raise NotFoundError("Push token not found")
