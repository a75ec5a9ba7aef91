"""
Friendship API routes.
Provides endpoints for friend requests, friend lists and unfriending.
"""
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.dependencies import get_current_user
from app.models.friendship import FriendshipStatus
from app.models.profile import Profile
from app.schemas.friendship import (
    FriendRequestCreate,
    FriendshipResponse,
    FriendshipStatusResponse,
    FriendListResponse,
    FriendRequestListResponse,
)
from app.schemas.profile import ProfileResponse
from app.services.friendship_service import FriendshipService

router = APIRouter()


@router.get(
    "/",
    response_model=FriendListResponse,
    summary="List friends",
    description="Accepted friends of the current user, ordered by display name."
)
async def list_friends(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    friends = await FriendshipService(db).get_friends(current_user.id)
    return FriendListResponse(
        friends=[ProfileResponse.model_validate(p) for p in friends],
        total=len(friends),
    )


@router.get(
    "/requests",
    response_model=FriendRequestListResponse,
    summary="List received friend requests"
)
async def list_pending_requests(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    requests = await FriendshipService(db).get_pending_requests(current_user.id)
    return FriendRequestListResponse(
        requests=[FriendshipResponse.model_validate(f) for f in requests],
        total=len(requests),
    )


@router.get(
    "/requests/sent",
    response_model=FriendRequestListResponse,
    summary="List sent friend requests"
)
async def list_sent_requests(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    requests = await FriendshipService(db).get_sent_requests(current_user.id)
    return FriendRequestListResponse(
        requests=[FriendshipResponse.model_validate(f) for f in requests],
        total=len(requests),
    )


@router.get(
    "/recent",
    response_model=FriendRequestListResponse,
    summary="Recently accepted friendships"
)
async def list_recent_friendships(
    limit: int = Query(10, ge=1, le=50),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    friendships = await FriendshipService(db).get_recent_friendships(current_user.id, limit=limit)
    return FriendRequestListResponse(
        requests=[FriendshipResponse.model_validate(f) for f in friendships],
        total=len(friendships),
    )


@router.get(
    "/status/{user_id}",
    response_model=FriendshipStatusResponse,
    summary="Friendship status with a user",
    description="Returns none, pending_sent, pending_received or accepted."
)
async def get_friendship_status(
    user_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    friendship = await FriendshipService(db).get_friendship_status(current_user.id, user_id)

    if friendship is None:
        return FriendshipStatusResponse(status="none")

    if friendship.status == FriendshipStatus.ACCEPTED:
        relation = "accepted"
    elif friendship.requester_id == current_user.id:
        relation = "pending_sent"
    else:
        relation = "pending_received"

    return FriendshipStatusResponse(
        status=relation,
        friendship=FriendshipResponse.model_validate(friendship),
    )


@router.post(
    "/requests",
    response_model=FriendshipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a friend request",
    description=(
        "Creates a pending request. If the two users already have a request or "
        "friendship in either direction, that row is returned unchanged."
    )
)
@limiter.limit(settings.rate_limit_friend_requests)
async def send_friend_request(
    request: Request,
    data: FriendRequestCreate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Send a friend request.

    - **addressee_id**: Profile ID of the user to befriend
    """
    friendship = await FriendshipService(db).send_friend_request(current_user.id, data.addressee_id)
    return FriendshipResponse.model_validate(friendship)


@router.post(
    "/requests/{friendship_id}/accept",
    response_model=FriendshipResponse,
    summary="Accept a friend request",
    description="Only the recipient of a pending request can accept it."
)
async def accept_friend_request(
    friendship_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    friendship = await FriendshipService(db).accept_friend_request(friendship_id, current_user.id)
    return FriendshipResponse.model_validate(friendship)


@router.post(
    "/requests/{friendship_id}/decline",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Decline or cancel a friend request"
)
async def decline_friend_request(
    friendship_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await FriendshipService(db).decline_friend_request(friendship_id, current_user.id)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unfriend a user by profile ID"
)
async def remove_friend_by_user(
    user_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await FriendshipService(db).remove_friend_by_user_id(current_user.id, user_id)


@router.delete(
    "/{friendship_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a friendship"
)
async def remove_friend(
    friendship_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await FriendshipService(db).remove_friend(friendship_id, current_user.id)
