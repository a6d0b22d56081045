"""Business logic for events, friendships, invites and visibility."""

from disrespect_tracker.services.errors import (
    AlreadyExistsError,
    DomainError,
    ExpiredError,
    ForbiddenError,
    InvalidCategoryError,
    NotFoundError,
    SelfReferenceError,
    ValidationError,
)
from disrespect_tracker.services.event_log import (
    CATEGORIES,
    EventLog,
    WeekBucket,
    get_event_log,
    weekly_summary,
)
from disrespect_tracker.services.friend_graph import (
    FriendAction,
    FriendGraph,
    PendingRequest,
    get_friend_graph,
)
from disrespect_tracker.services.invites import InviteService, get_invite_service
from disrespect_tracker.services.visibility import VisibilityGate

__all__ = [
    "AlreadyExistsError",
    "DomainError",
    "ExpiredError",
    "ForbiddenError",
    "InvalidCategoryError",
    "NotFoundError",
    "SelfReferenceError",
    "ValidationError",
    "CATEGORIES",
    "EventLog",
    "WeekBucket",
    "get_event_log",
    "weekly_summary",
    "FriendAction",
    "FriendGraph",
    "PendingRequest",
    "get_friend_graph",
    "InviteService",
    "get_invite_service",
    "VisibilityGate",
]
