"""Authorization predicate for reading another user's events."""

from sqlalchemy.ext.asyncio import AsyncSession

from disrespect_tracker.services.friend_graph import FriendGraph


class VisibilityGate:
    """Decides whether one user may see another user's shared events.

    Holds no state of its own; the friend graph is the source of truth.
    """

    def __init__(self, db: AsyncSession, friends: FriendGraph | None = None) -> None:
        self.friends = friends or FriendGraph(db)

    async def is_visible(self, viewer_id: int, target_user_id: int) -> bool:
        """Return True if ``viewer_id`` may see ``target_user_id``'s shared events."""
        if viewer_id == target_user_id:
            return True
        return await self.friends.are_friends(viewer_id, target_user_id)
