"""
Unit tests for FriendshipService.
Tests the request/accept lifecycle and its interaction with blocks.
"""
import pytest
from sqlalchemy import func, select

from app.core.exceptions import BlockedError, NotFoundError, PermissionDenied, ValidationFailed
from app.models.friendship import Friendship, FriendshipStatus
from app.models.notification import Notification, NotificationType
from app.services.block_service import BlockService
from app.services.friendship_service import FriendshipService


async def _friendship_rows(db_session) -> int:
    return await db_session.scalar(select(func.count()).select_from(Friendship))


@pytest.mark.asyncio
class TestSendFriendRequest:
    """Test cases for sending friend requests."""

    async def test_creates_pending_request(self, db_session, alice, bob):
        friendship = await FriendshipService(db_session).send_friend_request(alice.id, bob.id)

        assert friendship.status == FriendshipStatus.PENDING
        assert friendship.requester_id == alice.id
        assert friendship.addressee_id == bob.id

    async def test_notifies_addressee(self, db_session, alice, bob):
        friendship = await FriendshipService(db_session).send_friend_request(alice.id, bob.id)

        result = await db_session.execute(
            select(Notification).where(Notification.user_id == bob.id)
        )
        notifications = list(result.scalars().all())
        assert len(notifications) == 1
        assert notifications[0].type == NotificationType.FRIEND_REQUEST
        assert notifications[0].data == {"friendshipId": friendship.id, "userId": alice.id}

    async def test_repeat_request_returns_same_row(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        first = await service.send_friend_request(alice.id, bob.id)
        second = await service.send_friend_request(alice.id, bob.id)

        assert second.id == first.id
        assert await _friendship_rows(db_session) == 1

    async def test_crossed_requests_share_one_row(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        first = await service.send_friend_request(alice.id, bob.id)
        crossed = await service.send_friend_request(bob.id, alice.id)

        assert crossed.id == first.id
        assert crossed.status == FriendshipStatus.PENDING
        assert crossed.requester_id == alice.id
        assert await _friendship_rows(db_session) == 1

    async def test_crossed_request_does_not_auto_accept(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        first = await service.send_friend_request(alice.id, bob.id)
        await service.send_friend_request(bob.id, alice.id)

        # Only the original addressee can complete it
        with pytest.raises(PermissionDenied):
            await service.accept_friend_request(first.id, alice.id)

        accepted = await service.accept_friend_request(first.id, bob.id)
        assert accepted.status == FriendshipStatus.ACCEPTED

    async def test_request_to_friend_returns_accepted_row(self, db_session, alice, bob, make_friends):
        friendship = await make_friends(alice, bob)

        again = await FriendshipService(db_session).send_friend_request(bob.id, alice.id)

        assert again.id == friendship.id
        assert again.status == FriendshipStatus.ACCEPTED

    async def test_request_to_self(self, db_session, alice):
        with pytest.raises(ValidationFailed) as exc_info:
            await FriendshipService(db_session).send_friend_request(alice.id, alice.id)

        assert exc_info.value.reason == "self_target"

    async def test_request_to_unknown_user(self, db_session, alice):
        with pytest.raises(NotFoundError):
            await FriendshipService(db_session).send_friend_request(alice.id, "missing")

    @pytest.mark.parametrize("blocker", ["alice", "bob"])
    async def test_block_prevents_request(self, db_session, alice, bob, blocker):
        users = {"alice": alice, "bob": bob}
        other = bob if blocker == "alice" else alice
        await BlockService(db_session).block_user(users[blocker].id, other.id)

        with pytest.raises(BlockedError) as exc_info:
            await FriendshipService(db_session).send_friend_request(alice.id, bob.id)

        assert exc_info.value.reason == "blocked"
        assert await _friendship_rows(db_session) == 0

    async def test_lost_race_returns_winner(self, db_session, mocker, alice, bob):
        winner = await FriendshipService(db_session).send_friend_request(bob.id, alice.id)

        service = FriendshipService(db_session)
        lookup = service.friendship_repo.get_for_pair
        calls = []

        async def stale_first_lookup(user_a, user_b):
            calls.append((user_a, user_b))
            if len(calls) == 1:
                return None
            return await lookup(user_a, user_b)

        mocker.patch.object(service.friendship_repo, "get_for_pair", side_effect=stale_first_lookup)

        friendship = await service.send_friend_request(alice.id, bob.id)

        assert friendship.id == winner.id
        assert friendship.requester_id == bob.id
        assert len(calls) == 2
        assert await _friendship_rows(db_session) == 1

        # Only the winning request notified anyone
        result = await db_session.execute(
            select(Notification).where(Notification.user_id == bob.id)
        )
        assert result.scalars().all() == []


@pytest.mark.asyncio
class TestAcceptDeclineRemove:
    """Test cases for answering and ending friendships."""

    async def test_addressee_accepts(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        friendship = await service.accept_friend_request(request.id, bob.id)

        assert friendship.status == FriendshipStatus.ACCEPTED
        assert await service.get_friend_ids(alice.id) == [bob.id]
        assert await service.get_friend_ids(bob.id) == [alice.id]

    async def test_accept_notifies_requester(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)
        await service.accept_friend_request(request.id, bob.id)

        result = await db_session.execute(
            select(Notification).where(
                Notification.user_id == alice.id,
                Notification.type == NotificationType.FRIEND_ACCEPTED,
            )
        )
        notification = result.scalar_one()
        assert notification.data == {"friendshipId": request.id, "userId": bob.id}

    async def test_requester_cannot_accept(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        with pytest.raises(PermissionDenied):
            await service.accept_friend_request(request.id, alice.id)

    async def test_accept_unknown_request(self, db_session, bob):
        with pytest.raises(NotFoundError):
            await FriendshipService(db_session).accept_friend_request("missing", bob.id)

    async def test_accept_twice(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)
        await service.accept_friend_request(request.id, bob.id)

        with pytest.raises(NotFoundError):
            await service.accept_friend_request(request.id, bob.id)

    async def test_accept_after_block(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)
        await BlockService(db_session).block_user(alice.id, bob.id)

        with pytest.raises(BlockedError):
            await service.accept_friend_request(request.id, bob.id)

    async def test_decline_deletes_row(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        await service.decline_friend_request(request.id, bob.id)

        assert await service.get_friendship_status(alice.id, bob.id) is None
        # A fresh request is possible afterwards
        again = await service.send_friend_request(alice.id, bob.id)
        assert again.status == FriendshipStatus.PENDING

    async def test_requester_can_cancel(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        await service.decline_friend_request(request.id, alice.id)

        assert await _friendship_rows(db_session) == 0

    async def test_outsider_cannot_decline(self, db_session, alice, bob, carol):
        service = FriendshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        with pytest.raises(PermissionDenied):
            await service.decline_friend_request(request.id, carol.id)

        assert await _friendship_rows(db_session) == 1

    async def test_remove_friend(self, db_session, alice, bob, make_friends):
        friendship = await make_friends(alice, bob)
        service = FriendshipService(db_session)

        await service.remove_friend(friendship.id, alice.id)

        assert await service.get_friend_ids(bob.id) == []

    async def test_remove_friend_by_user_id(self, db_session, alice, bob, make_friends):
        await make_friends(alice, bob)
        service = FriendshipService(db_session)

        await service.remove_friend_by_user_id(bob.id, alice.id)

        assert await service.get_friendship_status(alice.id, bob.id) is None

        with pytest.raises(NotFoundError):
            await service.remove_friend_by_user_id(bob.id, alice.id)


@pytest.mark.asyncio
class TestFriendLookups:
    """Test cases for friend lists and request lists."""

    async def test_friends_are_one_hop(self, db_session, alice, bob, carol, make_friends):
        await make_friends(alice, bob)
        await make_friends(bob, carol)
        service = FriendshipService(db_session)

        assert await service.get_friend_ids(alice.id) == [bob.id]
        assert set(await service.get_friend_ids(bob.id)) == {alice.id, carol.id}

    async def test_pending_is_not_friend(self, db_session, alice, bob):
        service = FriendshipService(db_session)
        await service.send_friend_request(alice.id, bob.id)

        assert await service.get_friend_ids(alice.id) == []
        assert await service.get_friends(bob.id) == []

    async def test_friend_profiles_ordered_by_name(self, db_session, alice, bob, carol, make_friends):
        await make_friends(carol, alice)
        await make_friends(bob, alice)

        friends = await FriendshipService(db_session).get_friends(alice.id)

        assert [p.display_name for p in friends] == ["Bob", "Carol"]

    async def test_pending_lists(self, db_session, alice, bob, carol):
        service = FriendshipService(db_session)
        to_bob = await service.send_friend_request(alice.id, bob.id)
        to_carol = await service.send_friend_request(alice.id, carol.id)

        assert {f.id for f in await service.get_sent_requests(alice.id)} == {to_bob.id, to_carol.id}
        assert [f.id for f in await service.get_pending_requests(bob.id)] == [to_bob.id]
        assert await service.get_pending_requests(alice.id) == []

    async def test_recent_friendships(self, db_session, alice, bob, carol, make_friends):
        await make_friends(alice, bob)
        await FriendshipService(db_session).send_friend_request(alice.id, carol.id)

        recent = await FriendshipService(db_session).get_recent_friendships(alice.id)

        assert len(recent) == 1
        assert recent[0].other_party(alice.id) == bob.id
