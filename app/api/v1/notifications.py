"""
Notification API endpoints.
Provides push token registration and the in-app notification inbox.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.dependencies import get_current_user
from app.models.profile import Profile
from app.services.notification_service import NotificationService
from app.schemas.notification import (
    NotificationListResponse,
    PushTokenRegister,
    PushTokenResponse,
    UnreadCountResponse,
)

router = APIRouter()


@router.post(
    "/push-tokens",
    response_model=PushTokenResponse,
    status_code=status.HTTP_201_CREATED
)
async def register_push_token(
    data: PushTokenRegister,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Register the current device's push token.

    Registering the same token again refreshes its platform.

    **Authentication**: Required

    **Request Body**:
    - `token` (str): Device token issued by the push service
    - `platform` (str, optional): ios, android or web
    """
    push_token = await NotificationService(db).register_push_token(
        current_user.id, data.token, data.platform
    )
    return PushTokenResponse.model_validate(push_token)


@router.delete("/push-tokens/{token}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_push_token(
    token: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Unregister a device push token (e.g. on sign-out).

    **Returns**: HTTP 204 No Content on success, 404 if the token is unknown
    """
    await NotificationService(db).remove_push_token(current_user.id, token)


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the current user's notifications, newest first.

    **Returns**: Notifications with the unread total and a has_more flag
    """
    return await NotificationService(db).list_notifications(
        current_user.id, limit=limit, unread_only=unread_only
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    count = await NotificationService(db).get_unread_count(current_user.id)
    return UnreadCountResponse(unread_count=count)


@router.post("/read-all", response_model=UnreadCountResponse)
async def mark_all_read(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark every notification read. Returns the new unread total (0)."""
    await NotificationService(db).mark_all_as_read(current_user.id)
    return UnreadCountResponse(unread_count=0)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await NotificationService(db).mark_as_read(notification_id, current_user.id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await NotificationService(db).delete_notification(notification_id, current_user.id)
