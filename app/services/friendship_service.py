"""
Friendship service containing business logic for the friend graph.
Handles requests, acceptance, removal and friend lookups.
"""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BlockedError, NotFoundError, PermissionDenied
from app.models.friendship import Friendship, FriendshipStatus
from app.models.notification import NotificationType
from app.models.profile import Profile
from app.repositories.friendship_repo import FriendshipRepository
from app.repositories.profile_repo import ProfileRepository
from app.services.block_service import BlockService
from app.services.notification_service import NotificationService
from app.utils.validators import validate_distinct_users

logger = logging.getLogger(__name__)


class FriendshipService:
    """
    Service for friendship operations.

    One row per unordered pair of users, whatever its status:
    pending rows are accepted in place and declined or removed rows are
    deleted.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize friendship service.

        Args:
            db: Database session
        """
        self.db = db
        self.friendship_repo = FriendshipRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.block_service = BlockService(db)
        self.notification_service = NotificationService(db)

    async def get_friendship_status(self, user_a: str, user_b: str) -> Optional[Friendship]:
        """Friendship row between two users in either direction, or None."""
        return await self.friendship_repo.get_for_pair(user_a, user_b)

    async def send_friend_request(self, requester_id: str, addressee_id: str) -> Friendship:
        """
        Send a friend request.

        If the pair already has a row (pending in either direction, or
        accepted) that row is returned unchanged. A request crossing an
        existing pending one does not accept it; the original addressee
        still has to accept.

        Args:
            requester_id: Caller profile ID
            addressee_id: Profile to befriend

        Returns:
            The pending row created, or the existing row for the pair

        Raises:
            ValidationFailed: Request to self
            NotFoundError: Addressee does not exist
            BlockedError: A block exists between the users
        """
        validate_distinct_users(requester_id, addressee_id, "send a friend request to")

        if await self.profile_repo.get(addressee_id) is None:
            raise NotFoundError("User not found")

        if await self.block_service.is_blocked_pair(requester_id, addressee_id):
            raise BlockedError("Cannot send a friend request to this user")

        existing = await self.friendship_repo.get_for_pair(requester_id, addressee_id)
        if existing:
            logger.info(
                f"Friend request {requester_id} -> {addressee_id} resolved to existing "
                f"{existing.status.value} friendship {existing.id}"
            )
            return existing

        inserted = await self.friendship_repo.insert_if_absent(requester_id, addressee_id)
        friendship = await self.friendship_repo.get_for_pair(requester_id, addressee_id)
        if friendship is None:
            # Inserted and removed again before the re-read
            raise NotFoundError("Friendship not found")

        if inserted:
            await self.notification_service.notify(
                addressee_id,
                NotificationType.FRIEND_REQUEST,
                {"friendshipId": friendship.id, "userId": requester_id},
            )
            logger.info(f"Friend request {friendship.id}: {requester_id} -> {addressee_id}")

        return friendship

    async def accept_friend_request(self, friendship_id: str, caller_id: str) -> Friendship:
        """
        Accept a pending request addressed to the caller.

        Raises:
            NotFoundError: No pending request with that ID
            PermissionDenied: Caller is not the addressee
            BlockedError: A block was placed after the request was sent
        """
        friendship = await self.friendship_repo.get(friendship_id)
        if friendship is None or friendship.status != FriendshipStatus.PENDING:
            raise NotFoundError("Friend request not found")

        if friendship.addressee_id != caller_id:
            raise PermissionDenied("Only the recipient can accept this request")

        if await self.block_service.is_blocked_pair(friendship.requester_id, friendship.addressee_id):
            raise BlockedError("Cannot accept a friend request from this user")

        if not await self.friendship_repo.mark_accepted(friendship_id):
            raise NotFoundError("Friend request not found")

        friendship = await self.friendship_repo.refresh(friendship)

        await self.notification_service.notify(
            friendship.other_party(caller_id),
            NotificationType.FRIEND_ACCEPTED,
            {"friendshipId": friendship.id, "userId": caller_id},
        )
        logger.info(f"Friendship {friendship_id} accepted by {caller_id}")
        return friendship

    async def _delete_as_party(self, friendship_id: str, caller_id: str) -> None:
        friendship = await self.friendship_repo.get(friendship_id)
        if friendship is None:
            raise NotFoundError("Friendship not found")

        if not friendship.involves(caller_id):
            raise PermissionDenied("Not a party to this friendship")

        await self.friendship_repo.delete(friendship_id)

    async def decline_friend_request(self, friendship_id: str, caller_id: str) -> None:
        """
        Decline (or, for the requester, cancel) a request by deleting it.

        Either party may call this. The row is deleted whatever its status.

        Raises:
            NotFoundError: No such friendship
            PermissionDenied: Caller is not a party
        """
        await self._delete_as_party(friendship_id, caller_id)
        logger.info(f"Friendship {friendship_id} declined by {caller_id}")

    async def remove_friend(self, friendship_id: str, caller_id: str) -> None:
        """Unfriend. Same rules as decline_friend_request."""
        await self._delete_as_party(friendship_id, caller_id)
        logger.info(f"Friendship {friendship_id} removed by {caller_id}")

    async def remove_friend_by_user_id(self, caller_id: str, other_user_id: str) -> None:
        """
        Remove whatever friendship row exists with other_user_id.

        Raises:
            NotFoundError: The users have no friendship row
        """
        friendship = await self.friendship_repo.get_for_pair(caller_id, other_user_id)
        if friendship is None:
            raise NotFoundError("Friendship not found")

        await self.friendship_repo.delete(friendship.id)
        logger.info(f"Friendship {friendship.id} removed by {caller_id}")

    async def get_friends(self, user_id: str) -> List[Profile]:
        return await self.friendship_repo.get_friend_profiles(user_id)

    async def get_friend_ids(self, user_id: str) -> List[str]:
        """Accepted friends of user_id, one hop only."""
        return await self.friendship_repo.get_friend_ids(user_id)

    async def get_pending_requests(self, user_id: str) -> List[Friendship]:
        return await self.friendship_repo.get_pending_received(user_id)

    async def get_sent_requests(self, user_id: str) -> List[Friendship]:
        return await self.friendship_repo.get_pending_sent(user_id)

    async def get_recent_friendships(self, user_id: str, limit: int = 10) -> List[Friendship]:
        return await self.friendship_repo.get_recent_accepted(user_id, limit=limit)
