"""
Unit tests for NotificationFanoutService.
The push gateway is the recording MockTransport from conftest.
"""
import pytest
from sqlalchemy.exc import OperationalError

from app.models.base import generate_uuid
from app.models.park import Park, ParkReview
from app.services.conversation_service import ConversationService
from app.services.fanout_service import NotificationFanoutService
from app.services.friendship_service import FriendshipService
from app.services.notification_service import NotificationService


async def _register(db_session, profile, *tokens):
    service = NotificationService(db_session)
    for token in tokens:
        await service.register_push_token(profile.id, token, "ios")
    await db_session.commit()


@pytest.fixture
async def park(db_session):
    park = Park(id=generate_uuid(), name="Sunnyside Dog Park", state="New York")
    db_session.add(park)
    await db_session.commit()
    return park


@pytest.fixture
def fanout(db_session, gateway):
    return NotificationFanoutService(db_session, gateway.client())


@pytest.mark.asyncio
class TestNewMessageFanout:
    """Test cases for new message notifications."""

    async def test_one_batch_for_all_recipient_devices(
        self, db_session, fanout, gateway, alice, bob, conversation_id
    ):
        await _register(db_session, bob, "ExponentPushToken[bob-phone]", "ExponentPushToken[bob-tablet]")
        await _register(db_session, alice, "ExponentPushToken[alice-phone]")
        content = "x" * 150

        result = await fanout.handle_new_message({
            "record": {"id": "m1", "conversation_id": conversation_id, "sender_id": alice.id, "content": content}
        })

        assert result.status == "sent"
        assert result.tokens == 2
        assert result.delivered == 2
        assert len(gateway.batches) == 1

        batch = gateway.batches[0]
        assert {m["to"] for m in batch} == {"ExponentPushToken[bob-phone]", "ExponentPushToken[bob-tablet]"}
        for message in batch:
            assert message["title"] == "Alice"
            assert message["body"] == "x" * 100
            assert message["data"] == {"conversationId": conversation_id}
            assert message["sound"] == "default"

    async def test_bare_record_accepted(self, db_session, fanout, gateway, alice, bob, conversation_id):
        await _register(db_session, alice, "tok-alice")

        result = await fanout.handle_new_message(
            {"conversation_id": conversation_id, "sender_id": bob.id, "content": "Woof"}
        )

        assert result.status == "sent"
        assert gateway.batches[0][0]["body"] == "Woof"
        assert gateway.batches[0][0]["title"] == "Bob"

    async def test_unnamed_sender(self, db_session, fanout, gateway, make_profile, alice):
        nameless = await make_profile(None)
        conversation_id = await ConversationService(db_session).get_or_create_conversation(
            nameless.id, alice.id
        )
        await _register(db_session, alice, "tok-alice")

        await fanout.handle_new_message(
            {"conversation_id": conversation_id, "sender_id": nameless.id, "content": "hi"}
        )

        assert gateway.batches[0][0]["title"] == "New message"

    async def test_no_tokens(self, fanout, gateway, alice, conversation_id):
        result = await fanout.handle_new_message(
            {"conversation_id": conversation_id, "sender_id": alice.id, "content": "hi"}
        )

        assert result.status == "skipped"
        assert result.reason == "no_tokens"
        assert gateway.batches == []

    @pytest.mark.parametrize("payload", [None, {}, {"record": {"content": "hi"}}, ["not", "a", "row"]])
    async def test_invalid_payload(self, fanout, gateway, payload):
        result = await fanout.handle_new_message(payload)

        assert result.status == "skipped"
        assert result.reason == "invalid_payload"
        assert gateway.batches == []

    async def test_gateway_down(self, db_session, fanout, gateway, alice, bob, conversation_id):
        await _register(db_session, bob, "tok-bob")
        gateway.down = True

        result = await fanout.handle_new_message(
            {"conversation_id": conversation_id, "sender_id": alice.id, "content": "hi"}
        )

        assert result.status == "failed"
        assert result.reason == "gateway_unavailable"

    async def test_failed_tokens_reported(self, db_session, fanout, gateway, alice, bob, conversation_id):
        await _register(db_session, bob, "tok-good", "tok-stale")
        gateway.error_tokens.add("tok-stale")

        result = await fanout.handle_new_message(
            {"conversation_id": conversation_id, "sender_id": alice.id, "content": "hi"}
        )

        assert result.status == "sent"
        assert result.delivered == 1
        assert result.failed_tokens == ["tok-stale"]


@pytest.mark.asyncio
class TestCheckInFanout:
    """Test cases for friend check-in notifications."""

    async def test_notifies_accepted_friends(
        self, db_session, fanout, gateway, park, alice, bob, carol, make_profile, make_friends
    ):
        dave = await make_profile("Dave")
        await make_friends(alice, bob)
        await make_friends(carol, alice)
        await FriendshipService(db_session).send_friend_request(alice.id, dave.id)
        await _register(db_session, bob, "tok-bob")
        await _register(db_session, carol, "tok-carol")
        await _register(db_session, dave, "tok-dave")

        result = await fanout.handle_friend_checkin(
            {"record": {"id": "ci1", "user_id": alice.id, "park_id": park.id}}
        )

        assert result.status == "sent"
        assert result.recipients == 2
        batch = gateway.batches[0]
        assert {m["to"] for m in batch} == {"tok-bob", "tok-carol"}
        assert batch[0]["title"] == "Alice just checked in!"
        assert batch[0]["body"] == "Alice is at Sunnyside Dog Park right now."
        assert batch[0]["data"] == {"type": "friend_checkin", "parkId": park.id, "userId": alice.id}

    async def test_unknown_park_and_name(self, db_session, fanout, gateway, make_profile, bob, make_friends):
        nameless = await make_profile(None)
        await make_friends(nameless, bob)
        await _register(db_session, bob, "tok-bob")

        await fanout.handle_friend_checkin({"user_id": nameless.id, "park_id": "gone"})

        message = gateway.batches[0][0]
        assert message["title"] == "Your friend just checked in!"
        assert message["body"] == "Your friend is at a dog park right now."

    async def test_no_friends(self, fanout, gateway, park, alice):
        result = await fanout.handle_friend_checkin({"user_id": alice.id, "park_id": park.id})

        assert result.status == "skipped"
        assert result.reason == "no_recipients"
        assert gateway.batches == []


@pytest.mark.asyncio
class TestReviewReplyFanout:
    """Test cases for review reply notifications."""

    async def _reviews(self, db_session, park, author, replier, reply_content):
        parent = ParkReview(id=generate_uuid(), park_id=park.id, user_id=author.id, content="Great shade")
        db_session.add(parent)
        await db_session.flush()
        reply = ParkReview(
            id=generate_uuid(), park_id=park.id, user_id=replier.id,
            parent_id=parent.id, content=reply_content,
        )
        db_session.add(reply)
        await db_session.commit()
        return parent, reply

    def _payload(self, park, parent, reply, replier):
        return {
            "reply_id": reply.id,
            "parent_id": parent.id,
            "replier_id": replier.id,
            "park_id": park.id,
        }

    async def test_notifies_review_author(self, db_session, fanout, gateway, park, alice, bob):
        parent, reply = await self._reviews(db_session, park, alice, bob, "y" * 150)
        await _register(db_session, alice, "tok-alice")

        result = await fanout.handle_review_reply(self._payload(park, parent, reply, bob))

        assert result.status == "sent"
        message = gateway.batches[0][0]
        assert message["to"] == "tok-alice"
        assert message["title"] == "Bob replied to your review"
        assert message["body"] == "y" * 100 + "..."
        assert message["channelId"] == "default"
        assert message["data"] == {
            "type": "review_reply",
            "parkPath": "new-york/sunnyside-dog-park",
            "parkId": park.id,
            "reviewId": parent.id,
        }

    async def test_short_reply_kept_whole(self, db_session, fanout, gateway, park, alice, bob):
        parent, reply = await self._reviews(db_session, park, alice, bob, "Agreed!")
        await _register(db_session, alice, "tok-alice")

        await fanout.handle_review_reply(self._payload(park, parent, reply, bob))

        assert gateway.batches[0][0]["body"] == "Agreed!"

    async def test_empty_reply_uses_generic_body(self, db_session, fanout, gateway, park, alice, bob):
        parent, reply = await self._reviews(db_session, park, alice, bob, None)
        await _register(db_session, alice, "tok-alice")

        await fanout.handle_review_reply(self._payload(park, parent, reply, bob))

        assert gateway.batches[0][0]["body"] == "Bob replied to your review at Sunnyside Dog Park"

    async def test_self_reply_sends_nothing(self, db_session, fanout, gateway, park, alice):
        parent, reply = await self._reviews(db_session, park, alice, alice, "Also the water bowl")
        await _register(db_session, alice, "tok-alice")

        result = await fanout.handle_review_reply(self._payload(park, parent, reply, alice))

        assert result.status == "skipped"
        assert result.reason == "self_reply"
        assert gateway.batches == []

    async def test_missing_parent(self, fanout, gateway, park, bob):
        result = await fanout.handle_review_reply({
            "reply_id": "r1", "parent_id": "missing", "replier_id": bob.id, "park_id": park.id,
        })

        assert result.status == "skipped"
        assert result.reason == "parent_not_found"
        assert gateway.batches == []

    async def test_reply_lookup_failure_uses_generic_body(
        self, db_session, fanout, gateway, park, alice, bob, mocker
    ):
        parent, reply = await self._reviews(db_session, park, alice, bob, "Agreed!")
        await _register(db_session, alice, "tok-alice")
        mocker.patch.object(
            fanout.park_repo,
            "get_review",
            mocker.AsyncMock(side_effect=[parent, OperationalError("SELECT", {}, Exception("gone"))]),
        )

        result = await fanout.handle_review_reply(self._payload(park, parent, reply, bob))

        assert result.status == "sent"
        assert gateway.batches[0][0]["body"] == "Bob replied to your review at Sunnyside Dog Park"
