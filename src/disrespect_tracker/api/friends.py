"""Friend API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from disrespect_tracker.api.events import weeks_query
from disrespect_tracker.models.event import EventKind
from disrespect_tracker.models.user import User
from disrespect_tracker.schemas.event import EventResponse, FriendEventsResponse
from disrespect_tracker.schemas.friendship import (
    FriendRequestAction,
    FriendRequestCreate,
    FriendRequestResponse,
    FriendsResponse,
    PendingRequestResponse,
)
from disrespect_tracker.schemas.user import UserSummary
from disrespect_tracker.services.event_log import EventLog, get_event_log
from disrespect_tracker.services.friend_graph import FriendGraph, get_friend_graph
from disrespect_tracker.utils.security import CurrentUser

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("", response_model=FriendsResponse)
async def list_friends(
    current_user: CurrentUser,
    friend_graph: FriendGraph = Depends(get_friend_graph),
) -> FriendsResponse:
    """List the current user's friends and the requests waiting for their answer.

    Requires authentication.
    """
    friends = await friend_graph.list_friends(current_user.id)
    pending = await friend_graph.list_pending(current_user.id)

    return FriendsResponse(
        friends=[UserSummary.model_validate(friend) for friend in friends],
        pending_requests=[
            PendingRequestResponse(
                id=request.request_id,
                from_user=UserSummary.model_validate(request.from_user),
            )
            for request in pending
        ],
    )


@router.post("/requests", response_model=FriendRequestResponse, status_code=201)
async def send_friend_request(
    current_user: CurrentUser,
    request_data: FriendRequestCreate,
    friend_graph: FriendGraph = Depends(get_friend_graph),
) -> FriendRequestResponse:
    """Send a friend request to another user.

    Fails if the target is yourself (400), does not exist (404), or already has
    a pending or accepted friendship with you in either direction (409).
    Requires authentication.
    """
    friendship = await friend_graph.send_request(current_user.id, request_data.friend_id)
    target = await friend_graph.db.get(User, request_data.friend_id)

    return FriendRequestResponse(
        id=friendship.id,
        status=friendship.status,
        friend=UserSummary.model_validate(target),
    )


@router.patch("/requests/{friendship_id}", response_model=FriendRequestResponse)
async def respond_to_friend_request(
    friendship_id: int,
    current_user: CurrentUser,
    action_data: FriendRequestAction,
    friend_graph: FriendGraph = Depends(get_friend_graph),
) -> FriendRequestResponse:
    """Accept or reject a friend request addressed to the current user.

    Rejecting deletes the request, so the sender may ask again later.
    Requires authentication.
    """
    friendship = await friend_graph.respond(friendship_id, current_user.id, action_data.action)
    if friendship is None:
        return FriendRequestResponse()

    requester = await friend_graph.db.get(User, friendship.requester_id)
    return FriendRequestResponse(
        id=friendship.id,
        status=friendship.status,
        friend=UserSummary.model_validate(requester),
    )


@router.get("/{friend_id}/events/{kind}", response_model=FriendEventsResponse)
async def list_friend_events(
    friend_id: int,
    kind: EventKind,
    current_user: CurrentUser,
    weeks: int = Depends(weeks_query),
    event_log: EventLog = Depends(get_event_log),
) -> FriendEventsResponse:
    """List the events a friend has shared, newest first.

    Only events the friend marked as shared are returned.
    Requires authentication and an accepted friendship (403 otherwise).
    """
    events = await event_log.list_shared_events(current_user.id, friend_id, kind, weeks_back=weeks)

    friend = await event_log.db.get(User, friend_id)
    if friend is None:
        raise HTTPException(status_code=404, detail="User not found")

    return FriendEventsResponse(
        kind=kind,
        weeks=weeks,
        friend=UserSummary.model_validate(friend),
        events=[EventResponse.model_validate(event) for event in events],
    )
