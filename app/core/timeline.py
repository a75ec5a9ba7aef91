"""
Client-side view of one open conversation.

ConversationTimeline keeps the rendered message list consistent while
three things race: live messages arriving from the realtime feed, the
sender's own optimistic echo of a message it just sent, and older pages
being fetched with load_more. UnreadBadge keeps the app-wide unread
total while the user moves between conversations.

The server never instantiates these; they model the ordering and dedupe
rules a realtime client applies on top of MessageService.load_more pages
and the message webhook feed.
"""
import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from app.schemas.message import MessagePage

logger = logging.getLogger(__name__)

PageFetcher = Callable[[Optional[str]], Awaitable[MessagePage]]


class ConversationTimeline:
    """
    Ordered, de-duplicated message list for one conversation.

    Live messages go to the tail in arrival order and are never
    reordered. Older pages go to the head. A message ID is rendered at
    most once whichever path delivers it first.
    """

    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        self.messages: List[Any] = []
        self.next_cursor: Optional[str] = None
        self.has_more = True
        self.generation = 0
        self._ids: set[str] = set()

    def reset(self) -> None:
        """
        Drop everything (conversation closed or reopened).

        Bumps the generation so page loads still in flight are discarded.
        """
        self.messages = []
        self._ids.clear()
        self.next_cursor = None
        self.has_more = True
        self.generation += 1

    def append(self, message: Any) -> bool:
        """
        Add a live or optimistically echoed message at the tail.

        Returns:
            False if the message was already rendered
        """
        if message.conversation_id != self.conversation_id:
            return False
        if message.id in self._ids:
            return False

        self._ids.add(message.id)
        self.messages.append(message)
        return True

    def begin_page_load(self) -> int:
        """Token identifying the state a page request was issued against."""
        return self.generation

    def apply_page(self, token: int, page: MessagePage) -> bool:
        """
        Prepend an older page fetched with the given token.

        Returns:
            False if the page was superseded and discarded
        """
        if token != self.generation:
            logger.debug(
                f"Discarding stale page for conversation {self.conversation_id} "
                f"(generation {token} != {self.generation})"
            )
            return False

        older = [m for m in page.messages if m.id not in self._ids]
        self._ids.update(m.id for m in older)
        self.messages = older + self.messages
        self.next_cursor = page.next_cursor
        self.has_more = page.has_more
        return True

    async def load_more(self, fetch: PageFetcher) -> bool:
        """
        Fetch and prepend the next older page.

        Args:
            fetch: Coroutine function taking the current cursor

        Returns:
            True if a page was applied
        """
        if not self.has_more:
            return False

        token = self.begin_page_load()
        page = await fetch(self.next_cursor)
        return self.apply_page(token, page)

    def message_ids(self) -> List[str]:
        return [m.id for m in self.messages]


class UnreadBadge:
    """App-wide unread total shown on the messages tab."""

    def __init__(self, total: int = 0):
        self.total = total
        self.open_conversation_id: Optional[str] = None

    def open(self, conversation_id: Optional[str]) -> None:
        """Track which conversation is on screen (None when none is)."""
        self.open_conversation_id = conversation_id

    def on_message(self, message: Any, viewer_id: str) -> bool:
        """
        Count a newly inserted message.

        Returns:
            True if the badge was incremented
        """
        if message.sender_id == viewer_id:
            return False
        if message.conversation_id == self.open_conversation_id:
            return False

        self.total += 1
        return True

    def sync(self, counts: Iterable[int]) -> None:
        """Replace the total with a freshly fetched sum."""
        self.total = sum(counts)
