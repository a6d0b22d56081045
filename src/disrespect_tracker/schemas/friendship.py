"""Pydantic schemas for friend API endpoints."""

from pydantic import BaseModel, Field

from disrespect_tracker.models.friendship import FriendshipStatus
from disrespect_tracker.schemas.user import UserSummary
from disrespect_tracker.services.friend_graph import FriendAction


class PendingRequestResponse(BaseModel):
    """A friend request awaiting the current user's answer."""

    id: int = Field(description="Friend request ID")
    from_user: UserSummary = Field(description="User who sent the request")


class FriendsResponse(BaseModel):
    """The current user's friends and incoming requests."""

    friends: list[UserSummary] = Field(default_factory=list, description="Accepted friends")
    pending_requests: list[PendingRequestResponse] = Field(
        default_factory=list, description="Requests waiting for your answer"
    )


class FriendRequestCreate(BaseModel):
    """Schema for sending a friend request."""

    friend_id: int = Field(description="User ID to send the request to")


class FriendRequestAction(BaseModel):
    """Schema for answering a friend request."""

    action: FriendAction = Field(description="accept or reject")


class FriendRequestResponse(BaseModel):
    """Result of sending or answering a friend request."""

    id: int | None = Field(default=None, description="Friend request ID (null once rejected)")
    status: FriendshipStatus | None = Field(
        default=None, description="pending or accepted (null once rejected)"
    )
    friend: UserSummary | None = Field(default=None, description="The other user")
