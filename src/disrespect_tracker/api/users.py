"""User search API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select

from disrespect_tracker.models.user import User
from disrespect_tracker.schemas.user import UserSearchResponse, UserSearchResult
from disrespect_tracker.services.friend_graph import FriendGraph, get_friend_graph
from disrespect_tracker.utils.security import CurrentUser

router = APIRouter(prefix="/users", tags=["users"])

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 5


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    current_user: CurrentUser,
    q: str = Query("", max_length=100, description="Username or name fragment"),
    friend_graph: FriendGraph = Depends(get_friend_graph),
) -> UserSearchResponse:
    """Find searchable users by username or name.

    Excludes the current user and anyone who opted out of search. Each hit is
    annotated with its friendship status relative to the current user.
    Queries shorter than two characters return nothing.
    Requires authentication.
    """
    query = q.strip().lower()
    if len(query) < MIN_QUERY_LENGTH:
        return UserSearchResponse()

    result = await friend_graph.db.execute(
        select(User)
        .where(
            User.id != current_user.id,
            User.searchable.is_(True),
            User.is_active.is_(True),
            or_(
                User.username.icontains(query, autoescape=True),
                User.name.icontains(query, autoescape=True),
            ),
        )
        .order_by(User.username)
        .limit(MAX_RESULTS)
    )
    users = result.scalars().all()

    statuses = await friend_graph.friendship_statuses(current_user.id, [u.id for u in users])

    return UserSearchResponse(
        users=[
            UserSearchResult(
                id=user.id,
                username=user.username,
                name=user.name,
                friendship_status=statuses[user.id].value if user.id in statuses else None,
            )
            for user in users
        ]
    )
