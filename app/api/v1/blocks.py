"""
Block API routes.
Provides endpoints for blocking, unblocking and block status checks.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.dependencies import get_current_user
from app.models.profile import Profile
from app.schemas.block import BlockStatusResponse, BlockedUsersResponse
from app.schemas.profile import ProfileResponse
from app.services.block_service import BlockService

router = APIRouter()


@router.get(
    "/",
    response_model=BlockedUsersResponse,
    summary="List blocked users",
    description="Users the current user has blocked, most recent first."
)
async def list_blocked_users(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    users = await BlockService(db).get_blocked_users(current_user.id)
    return BlockedUsersResponse(
        users=[ProfileResponse.model_validate(p) for p in users],
        total=len(users),
    )


@router.get(
    "/{user_id}/status",
    response_model=BlockStatusResponse,
    summary="Block status with a user",
    description="none, blocked (you blocked them) or blocked_by (they blocked you)."
)
async def get_block_status(
    user_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    block_status = await BlockService(db).get_block_status(current_user.id, user_id)
    return BlockStatusResponse(user_id=user_id, status=block_status)


@router.post(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Block a user"
)
async def block_user(
    user_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await BlockService(db).block_user(current_user.id, user_id)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unblock a user"
)
async def unblock_user(
    user_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await BlockService(db).unblock_user(current_user.id, user_id)
