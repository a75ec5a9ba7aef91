"""
Notification repository for database operations.
Handles in-app notifications and device push tokens.
"""
from typing import List, Optional, Tuple

from sqlalchemy import select, and_, delete, desc, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import generate_uuid
from app.models.notification import Notification, NotificationType
from app.models.push_token import PushToken
from app.repositories.base import BaseRepository
from app.utils.datetime_utils import utc_now


class NotificationRepository(BaseRepository[Notification]):
    """Repository for in-app notification database operations."""

    def __init__(self, db: AsyncSession):
        """Initialize notification repository."""
        super().__init__(Notification, db)

    async def create_notification(
        self,
        user_id: str,
        type: NotificationType,
        data: dict
    ) -> Notification:
        """Insert one notification for a recipient."""
        return await self.create(user_id=user_id, type=type, data=data, read=False)

    async def list_for_user(
        self,
        user_id: str,
        limit: int = 50,
        unread_only: bool = False
    ) -> Tuple[List[Notification], bool]:
        """
        List notifications newest first.

        Args:
            user_id: Recipient profile ID
            limit: Maximum rows to return
            unread_only: Only return unread notifications

        Returns:
            Tuple of (notifications, has_more)
        """
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.read.is_(False))

        query = query.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit + 1)

        result = await self.db.execute(query)
        notifications = list(result.scalars().all())

        has_more = len(notifications) > limit
        if has_more:
            notifications = notifications[:limit]

        return notifications, has_more

    async def count_unread(self, user_id: str) -> int:
        return await self.count(user_id=user_id, read=False)

    async def get_for_user(self, notification_id: str, user_id: str) -> Optional[Notification]:
        """Get a notification only if it belongs to user_id."""
        result = await self.db.execute(
            select(Notification).where(
                and_(
                    Notification.id == notification_id,
                    Notification.user_id == user_id
                )
            )
        )
        return result.scalar_one_or_none()

    async def mark_read(self, notification_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            update(Notification)
            .where(
                and_(
                    Notification.id == notification_id,
                    Notification.user_id == user_id
                )
            )
            .values(read=True, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount > 0

    async def mark_all_read(self, user_id: str) -> int:
        """
        Mark every unread notification as read.

        Returns:
            Number of rows updated
        """
        result = await self.db.execute(
            update(Notification)
            .where(
                and_(
                    Notification.user_id == user_id,
                    Notification.read.is_(False)
                )
            )
            .values(read=True, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount

    async def delete_for_user(self, notification_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            delete(Notification).where(
                and_(
                    Notification.id == notification_id,
                    Notification.user_id == user_id
                )
            )
        )
        await self.db.flush()
        return result.rowcount > 0


class PushTokenRepository(BaseRepository[PushToken]):
    """Repository for device push token database operations."""

    def __init__(self, db: AsyncSession):
        """Initialize push token repository."""
        super().__init__(PushToken, db)

    async def upsert(self, user_id: str, token: str, platform: Optional[str] = None) -> PushToken:
        """
        Register a device token; re-registering refreshes the platform.

        Args:
            user_id: Device owner
            token: Gateway token
            platform: ios, android or web

        Returns:
            The stored token row
        """
        now = utc_now()
        stmt = self._insert().values(
            id=generate_uuid(),
            user_id=user_id,
            token=token,
            platform=platform,
            created_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "token"],
            set_={"platform": stmt.excluded.platform, "updated_at": now},
        )
        await self.db.execute(stmt)
        await self.db.flush()

        result = await self.db.execute(
            select(PushToken)
            .where(and_(PushToken.user_id == user_id, PushToken.token == token))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def remove(self, user_id: str, token: str) -> bool:
        result = await self.db.execute(
            delete(PushToken).where(
                and_(PushToken.user_id == user_id, PushToken.token == token)
            )
        )
        await self.db.flush()
        return result.rowcount > 0

    async def get_tokens_for_users(self, user_ids: List[str]) -> List[str]:
        """
        All device tokens registered by any of the given users.

        Args:
            user_ids: Recipient profile IDs

        Returns:
            Token strings, one per registered device
        """
        if not user_ids:
            return []

        result = await self.db.execute(
            select(PushToken.token)
            .where(PushToken.user_id.in_(user_ids))
            .order_by(PushToken.user_id, PushToken.created_at)
        )
        return list(result.scalars().all())
