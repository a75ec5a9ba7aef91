"""
Conversation API routes.
Provides endpoints for opening, listing and reading conversations.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.dependencies import get_current_user
from app.models.profile import Profile
from app.schemas.conversation import (
    ConversationCreate,
    ConversationCreateResponse,
    ConversationListResponse,
    ConversationResponse,
    TotalUnreadResponse,
)
from app.services.conversation_service import ConversationService
from app.services.unread_service import UnreadService, mark_read_in_background

router = APIRouter()


@router.get(
    "/",
    response_model=ConversationListResponse,
    summary="List conversations",
    description="Conversations of the current user, most recent activity first."
)
async def list_conversations(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    conversations = await ConversationService(db).get_user_conversations(current_user.id)
    return ConversationListResponse(conversations=conversations, total=len(conversations))


@router.post(
    "/",
    response_model=ConversationCreateResponse,
    summary="Open a conversation",
    description=(
        "Returns the conversation between the current user and user_id, "
        "creating it on first contact."
    )
)
async def open_conversation(
    data: ConversationCreate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get or create the direct conversation with another user.

    - **user_id**: Profile ID of the other participant
    """
    conversation_id = await ConversationService(db).get_or_create_conversation(
        current_user.id, data.user_id
    )
    return ConversationCreateResponse(id=conversation_id)


@router.get(
    "/unread-count",
    response_model=TotalUnreadResponse,
    summary="Total unread messages"
)
async def get_total_unread(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    total = await UnreadService(db).get_total_unread(current_user.id)
    return TotalUnreadResponse(unread_count=total)


@router.get(
    "/{conversation_id}",
    response_model=ConversationResponse,
    summary="Get a conversation"
)
async def get_conversation(
    conversation_id: str,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await ConversationService(db).get_conversation(conversation_id, current_user.id)


@router.post(
    "/{conversation_id}/read",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Mark a conversation read",
    description="Moves the read marker in the background; the response does not wait for it."
)
async def mark_conversation_read(
    conversation_id: str,
    background_tasks: BackgroundTasks,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ConversationService(db).get_conversation(conversation_id, current_user.id)
    background_tasks.add_task(mark_read_in_background, conversation_id, current_user.id)
    return {"status": "accepted"}
