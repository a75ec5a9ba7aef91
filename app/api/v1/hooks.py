"""
Database webhook endpoints.

The database calls these after inserting a message, a check-in or a
review reply. Each call runs one fan-out and answers with its outcome.
Expected no-ops (no recipients, no tokens, self-reply) answer 200; a
gateway outage answers 502 so the caller may deliver the event again.
"""
from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.push_gateway import PushGatewayClient
from app.dependencies import get_push_gateway, require_webhook_secret
from app.schemas.notification import FanoutResult
from app.services.fanout_service import NotificationFanoutService

router = APIRouter(dependencies=[Depends(require_webhook_secret)])


def _respond(result: FanoutResult, response: Response) -> FanoutResult:
    if result.status == "failed":
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return result


@router.post("/messages", response_model=FanoutResult, summary="New message inserted")
async def on_message_inserted(
    response: Response,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    gateway: PushGatewayClient = Depends(get_push_gateway)
):
    result = await NotificationFanoutService(db, gateway).handle_new_message(payload)
    return _respond(result, response)


@router.post("/check-ins", response_model=FanoutResult, summary="Check-in inserted")
async def on_check_in_inserted(
    response: Response,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    gateway: PushGatewayClient = Depends(get_push_gateway)
):
    result = await NotificationFanoutService(db, gateway).handle_friend_checkin(payload)
    return _respond(result, response)


@router.post("/review-replies", response_model=FanoutResult, summary="Review reply inserted")
async def on_review_reply_inserted(
    response: Response,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    gateway: PushGatewayClient = Depends(get_push_gateway)
):
    result = await NotificationFanoutService(db, gateway).handle_review_reply(payload)
    return _respond(result, response)
