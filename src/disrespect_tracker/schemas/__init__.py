"""Pydantic schemas for request/response validation."""

from disrespect_tracker.schemas.event import (
    CategoryCatalogResponse,
    CategoryResponse,
    EventCreate,
    EventListResponse,
    EventResponse,
    FriendEventsResponse,
    WeekBucketResponse,
    WeeklyEventsResponse,
)
from disrespect_tracker.schemas.friendship import (
    FriendRequestAction,
    FriendRequestCreate,
    FriendRequestResponse,
    FriendsResponse,
    PendingRequestResponse,
)
from disrespect_tracker.schemas.invite import InviteResponse, InviteValidationResponse
from disrespect_tracker.schemas.user import (
    ForgotPasswordRequest,
    MessageResponse,
    RegisterResponse,
    ResetPasswordRequest,
    Token,
    TokenPayload,
    UserCreate,
    UserLogin,
    UserResponse,
    UserSearchResponse,
    UserSearchResult,
    UserSummary,
    UserUpdate,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
    "UserSearchResult",
    "UserSearchResponse",
    "UserLogin",
    "Token",
    "TokenPayload",
    "RegisterResponse",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "MessageResponse",
    # Event schemas
    "EventCreate",
    "EventResponse",
    "EventListResponse",
    "WeekBucketResponse",
    "WeeklyEventsResponse",
    "FriendEventsResponse",
    "CategoryResponse",
    "CategoryCatalogResponse",
    # Friend schemas
    "FriendsResponse",
    "PendingRequestResponse",
    "FriendRequestCreate",
    "FriendRequestAction",
    "FriendRequestResponse",
    # Invite schemas
    "InviteResponse",
    "InviteValidationResponse",
]
