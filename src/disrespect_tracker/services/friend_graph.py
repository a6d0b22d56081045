"""Friend requests, friendships and invite redemption.

A friendship is a single row per unordered pair of users. It starts
``pending`` when one user asks, becomes ``accepted`` when the other agrees,
and is deleted outright on rejection so the pair may try again later.
Redeeming an invite is the only way to create an already accepted row.
"""

import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from fastapi import Depends
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from disrespect_tracker.database import get_db
from disrespect_tracker.models.friendship import Friendship, FriendshipStatus, canonical_pair
from disrespect_tracker.models.user import User
from disrespect_tracker.services.errors import (
    AlreadyExistsError,
    ExpiredError,
    NotFoundError,
    SelfReferenceError,
)
from disrespect_tracker.services.invites import InviteService
from disrespect_tracker.utils.weeks import utcnow

logger = logging.getLogger(__name__)


class FriendAction(str, enum.Enum):
    """Response to a pending friend request."""

    ACCEPT = "accept"
    REJECT = "reject"


@dataclass
class PendingRequest:
    """A friend request awaiting the current user's answer."""

    request_id: int
    from_user: User


class FriendGraph:
    """Domain operations on the friendship graph."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow) -> None:
        self.db = db
        self.clock = clock

    async def _get_pair(self, user_a_id: int, user_b_id: int) -> Friendship | None:
        low, high = canonical_pair(user_a_id, user_b_id)
        result = await self.db.execute(
            select(Friendship).where(
                Friendship.user_low_id == low,
                Friendship.user_high_id == high,
            )
        )
        return result.scalar_one_or_none()

    async def _insert(self, friendship: Friendship) -> Friendship:
        self.db.add(friendship)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # The pair constraint caught a row inserted concurrently by the other side
            raise AlreadyExistsError("Friend request already exists") from e
        return friendship

    async def send_request(self, from_id: int, to_id: int) -> Friendship:
        """Send a friend request from ``from_id`` to ``to_id``.

        Raises:
            SelfReferenceError: If a user tries to befriend themself.
            NotFoundError: If ``to_id`` is not an existing user.
            AlreadyExistsError: If the pair is already pending or accepted, in either direction.
        """
        if from_id == to_id:
            raise SelfReferenceError()

        target = await self.db.get(User, to_id)
        if target is None:
            raise NotFoundError("User not found")

        if await self._get_pair(from_id, to_id) is not None:
            raise AlreadyExistsError("Friend request already exists")

        friendship = await self._insert(Friendship.between(from_id, to_id))
        logger.info("User %s sent a friend request to user %s", from_id, to_id)
        return friendship

    async def respond(
        self,
        friendship_id: int,
        responder_id: int,
        action: FriendAction,
    ) -> Friendship | None:
        """Accept or reject a pending request addressed to ``responder_id``.

        Returns the accepted friendship, or None once a rejected request is deleted.

        Raises:
            NotFoundError: If the request does not exist or is not addressed to
                ``responder_id`` (a requester cannot answer their own request).
        """
        friendship = await self.db.get(Friendship, friendship_id)
        if friendship is None or friendship.addressee_id != responder_id:
            raise NotFoundError("Friend request not found")

        if action is FriendAction.REJECT:
            await self.db.delete(friendship)
            await self.db.flush()
            logger.info("User %s rejected friend request %s", responder_id, friendship_id)
            return None

        if friendship.status is not FriendshipStatus.ACCEPTED:
            friendship.status = FriendshipStatus.ACCEPTED
            friendship.updated_at = self.clock()
            await self.db.flush()
            logger.info("User %s accepted friend request %s", responder_id, friendship_id)
        return friendship

    async def are_friends(self, user_a_id: int, user_b_id: int) -> bool:
        """Return True if an accepted friendship links the two users."""
        if user_a_id == user_b_id:
            return False
        friendship = await self._get_pair(user_a_id, user_b_id)
        return friendship is not None and friendship.status is FriendshipStatus.ACCEPTED

    async def list_friends(self, user_id: int) -> list[User]:
        """Return every user with an accepted friendship to ``user_id``, by username."""
        result = await self.db.execute(
            select(User)
            .join(
                Friendship,
                or_(
                    and_(Friendship.requester_id == user_id, Friendship.addressee_id == User.id),
                    and_(Friendship.addressee_id == user_id, Friendship.requester_id == User.id),
                ),
            )
            .where(Friendship.status == FriendshipStatus.ACCEPTED)
            .order_by(User.username)
        )
        return list(result.scalars().unique().all())

    async def list_pending(self, user_id: int) -> list[PendingRequest]:
        """Return pending requests addressed to ``user_id``, oldest first."""
        result = await self.db.execute(
            select(Friendship)
            .where(
                Friendship.addressee_id == user_id,
                Friendship.status == FriendshipStatus.PENDING,
            )
            .options(selectinload(Friendship.requester))
            .order_by(Friendship.created_at, Friendship.id)
        )
        return [
            PendingRequest(request_id=friendship.id, from_user=friendship.requester)
            for friendship in result.scalars().all()
        ]

    async def friendship_statuses(
        self,
        user_id: int,
        other_ids: Iterable[int],
    ) -> dict[int, FriendshipStatus]:
        """Map each of ``other_ids`` that has a friendship row with ``user_id`` to its status."""
        other_ids = [other_id for other_id in other_ids if other_id != user_id]
        if not other_ids:
            return {}

        result = await self.db.execute(
            select(Friendship).where(
                or_(
                    and_(
                        Friendship.requester_id == user_id,
                        Friendship.addressee_id.in_(other_ids),
                    ),
                    and_(
                        Friendship.addressee_id == user_id,
                        Friendship.requester_id.in_(other_ids),
                    ),
                )
            )
        )
        return {
            friendship.other_user_id(user_id): friendship.status
            for friendship in result.scalars().all()
        }

    async def redeem_invite(self, invite_token: str, new_user_id: int) -> bool:
        """Befriend ``new_user_id`` with the issuer of ``invite_token``.

        The friendship is created already accepted. Failure is never fatal:
        a missing, expired or self-issued invite, or an existing link, just
        returns False.
        """
        try:
            invite = await InviteService(self.db, clock=self.clock).get_valid_invite(invite_token)
        except (NotFoundError, ExpiredError) as e:
            logger.info("Skipping invite redemption for user %s: %s", new_user_id, e)
            return False

        inviter_id = invite.user_id
        if inviter_id == new_user_id:
            logger.info("User %s tried to redeem their own invite", new_user_id)
            return False

        existing = await self._get_pair(inviter_id, new_user_id)
        if existing is not None:
            if existing.status is FriendshipStatus.ACCEPTED:
                return False
            existing.status = FriendshipStatus.ACCEPTED
            existing.updated_at = self.clock()
            await self.db.flush()
        else:
            await self._insert(
                Friendship.between(inviter_id, new_user_id, status=FriendshipStatus.ACCEPTED)
            )

        logger.info("User %s joined via invite from user %s", new_user_id, inviter_id)
        return True


async def get_friend_graph(db: AsyncSession = Depends(get_db)) -> FriendGraph:
    """Dependency that provides a FriendGraph bound to the request session."""
    return FriendGraph(db)
