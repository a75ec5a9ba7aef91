"""
Notification fan-out service.

Turns one inserted row (a message, a check-in, a review reply) into a
single batched push request covering every device of every recipient.
Each invocation is independent: it reads what it needs, sends one batch
and reports the outcome. Nothing is retried here; the caller decides
whether a failed invocation is re-delivered.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.push_gateway import PushGatewayClient, PushGatewayException
from app.repositories.conversation_repo import ConversationRepository
from app.repositories.friendship_repo import FriendshipRepository
from app.repositories.notification_repo import PushTokenRepository
from app.repositories.park_repo import ParkRepository
from app.repositories.profile_repo import ProfileRepository
from app.schemas.hooks import CheckInRecord, MessageRecord, ReviewReplyRecord, unwrap_record
from app.schemas.notification import FanoutResult, PushMessage
from app.utils.helpers import build_park_path, truncate_text

logger = logging.getLogger(__name__)


class NotificationFanoutService:
    """Service that delivers push notifications for new rows."""

    def __init__(self, db: AsyncSession, gateway: Optional[PushGatewayClient] = None):
        """
        Initialize fan-out service.

        Args:
            db: Database session
            gateway: Push gateway client (a fresh default client if omitted)
        """
        self.db = db
        self.gateway = gateway or PushGatewayClient()
        self.conversation_repo = ConversationRepository(db)
        self.friendship_repo = FriendshipRepository(db)
        self.push_token_repo = PushTokenRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.park_repo = ParkRepository(db)

    async def _deliver(
        self,
        kind: str,
        recipients: List[str],
        build: Callable[[str], PushMessage]
    ) -> FanoutResult:
        """
        Send one batch with one message per recipient device.

        Args:
            kind: Event name for logging
            recipients: Recipient profile IDs
            build: Builds the message for one device token

        Returns:
            FanoutResult
        """
        tokens = await self.push_token_repo.get_tokens_for_users(recipients)
        if not tokens:
            logger.info(f"{kind}: no push tokens for {len(recipients)} recipients")
            return FanoutResult.skipped("no_tokens", recipients=len(recipients))

        messages = [build(token) for token in tokens]

        try:
            tickets = await self.gateway.send_batch(messages)
        except PushGatewayException as e:
            logger.error(f"{kind}: push gateway unavailable: {e}")
            return FanoutResult(
                status="failed",
                reason="gateway_unavailable",
                recipients=len(recipients),
                tokens=len(tokens),
            )

        failed_tokens = [t.token for t in tickets if not t.ok]
        delivered = len(tickets) - len(failed_tokens)
        logger.info(
            f"{kind}: sent {len(tokens)} notifications to {len(recipients)} recipients "
            f"({delivered} ok, {len(failed_tokens)} failed)"
        )
        return FanoutResult(
            status="sent",
            recipients=len(recipients),
            tokens=len(tokens),
            delivered=delivered,
            failed_tokens=failed_tokens,
        )

    async def handle_new_message(self, payload: Dict[str, Any]) -> FanoutResult:
        """
        Notify the other participants of a conversation about a new message.

        Title is the sender's display name, body the first characters of
        the message, data carries the conversation ID for deep linking.
        """
        try:
            record = MessageRecord.model_validate(unwrap_record(payload))
        except ValidationError:
            logger.warning("new_message: invalid payload")
            return FanoutResult.skipped("invalid_payload")

        participant_ids = await self.conversation_repo.get_participant_ids(record.conversation_id)
        recipients = [uid for uid in participant_ids if uid != record.sender_id]
        if not recipients:
            return FanoutResult.skipped("no_recipients")

        sender_name = await self.profile_repo.get_display_name(record.sender_id)
        title = sender_name or "New message"
        body = truncate_text(record.content, settings.notification_preview_length)

        return await self._deliver(
            "new_message",
            recipients,
            lambda token: PushMessage(
                to=token,
                title=title,
                body=body,
                data={"conversationId": record.conversation_id},
            ),
        )

    async def handle_friend_checkin(self, payload: Dict[str, Any]) -> FanoutResult:
        """Tell a user's accepted friends that they checked in at a park."""
        try:
            record = CheckInRecord.model_validate(unwrap_record(payload))
        except ValidationError:
            logger.warning("friend_checkin: invalid payload")
            return FanoutResult.skipped("invalid_payload")

        friend_ids = await self.friendship_repo.get_friend_ids(record.user_id)
        if not friend_ids:
            return FanoutResult.skipped("no_recipients")

        user_name = await self.profile_repo.get_display_name(record.user_id) or "Your friend"
        park = await self.park_repo.get(record.park_id)
        park_name = park.name if park and park.name else "a dog park"

        return await self._deliver(
            "friend_checkin",
            friend_ids,
            lambda token: PushMessage(
                to=token,
                title=f"{user_name} just checked in!",
                body=f"{user_name} is at {park_name} right now.",
                data={"type": "friend_checkin", "parkId": record.park_id, "userId": record.user_id},
            ),
        )

    async def handle_review_reply(self, payload: Dict[str, Any]) -> FanoutResult:
        """
        Tell a review's author that someone replied to it.

        Replies to one's own review send nothing.
        """
        try:
            record = ReviewReplyRecord.model_validate(unwrap_record(payload))
        except ValidationError:
            logger.warning("review_reply: invalid payload")
            return FanoutResult.skipped("invalid_payload")

        parent = await self.park_repo.get_review(record.parent_id)
        if parent is None:
            return FanoutResult.skipped("parent_not_found")

        if parent.user_id == record.replier_id:
            return FanoutResult.skipped("self_reply")

        replier_name = await self.profile_repo.get_display_name(record.replier_id) or "Someone"
        park = await self.park_repo.get(record.park_id)
        park_name = park.name if park and park.name else "a dog park"
        park_path = build_park_path(
            record.park_id,
            park.name if park else None,
            park.state if park else None,
        )

        preview = ""
        try:
            reply = await self.park_repo.get_review(record.reply_id)
        except SQLAlchemyError as e:
            logger.warning(f"review_reply: reply lookup failed: {e}")
            reply = None
        if reply is not None and reply.content:
            preview = truncate_text(reply.content, settings.notification_preview_length, "...")
        body = preview or f"{replier_name} replied to your review at {park_name}"

        return await self._deliver(
            "review_reply",
            [parent.user_id],
            lambda token: PushMessage(
                to=token,
                title=f"{replier_name} replied to your review",
                body=body,
                data={
                    "type": "review_reply",
                    "parkPath": park_path,
                    "parkId": record.park_id,
                    "reviewId": record.parent_id,
                },
                channel_id="default",
            ),
        )
