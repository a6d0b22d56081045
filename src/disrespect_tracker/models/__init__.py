"""SQLAlchemy ORM models."""

from disrespect_tracker.models.event import Event, EventKind
from disrespect_tracker.models.friendship import Friendship, FriendshipStatus
from disrespect_tracker.models.invite import Invite
from disrespect_tracker.models.user import PasswordReset, Session, User

__all__ = [
    "Event",
    "EventKind",
    "Friendship",
    "FriendshipStatus",
    "Invite",
    "PasswordReset",
    "Session",
    "User",
]
