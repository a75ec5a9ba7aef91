"""
Message API routes.
Provides endpoints for sending messages and paging through history.
"""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.dependencies import get_current_user
from app.models.profile import Profile
from app.schemas.message import MessageCreate, MessagePage, MessageResponse
from app.services.message_service import MessageService
from app.services.unread_service import mark_read_in_background

router = APIRouter()


@router.post(
    "/",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a new message",
    description="Send a message to a conversation. Fails with reason 'blocked' across a block."
)
@limiter.limit(settings.rate_limit_messages)
async def send_message(
    request: Request,
    message_data: MessageCreate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Send a new message to a conversation.

    - **conversation_id**: ID of the conversation
    - **content**: Message text (not blank)
    """
    message = await MessageService(db).send_message(
        conversation_id=message_data.conversation_id,
        sender_id=current_user.id,
        content=message_data.content,
    )
    return MessageResponse.model_validate(message)


@router.get(
    "/{conversation_id}",
    response_model=MessagePage,
    summary="Get conversation messages",
    description=(
        "One page of history, oldest first. Pass next_cursor back as cursor "
        "to load older messages while has_more is true."
    )
)
async def get_messages(
    conversation_id: str,
    background_tasks: BackgroundTasks,
    cursor: Optional[str] = Query(None, description="next_cursor from the previous page"),
    limit: Optional[int] = Query(None, description="Messages per page"),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    page = await MessageService(db).load_more(
        conversation_id, current_user.id, cursor=cursor, page_size=limit
    )

    # Opening the newest page counts as reading the conversation
    if cursor is None:
        background_tasks.add_task(mark_read_in_background, conversation_id, current_user.id)

    return page
