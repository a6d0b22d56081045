"""Tests for the friend graph service."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select

from disrespect_tracker.models.friendship import Friendship, FriendshipStatus
from disrespect_tracker.models.invite import Invite
from disrespect_tracker.services.errors import (
    AlreadyExistsError,
    NotFoundError,
    SelfReferenceError,
    ValidationError,
)
from disrespect_tracker.services.friend_graph import FriendAction, FriendGraph
from disrespect_tracker.services.visibility import VisibilityGate

NOW = datetime(2024, 12, 25, 12, 0, tzinfo=UTC)


async def count_friendships(db_session) -> int:
    result = await db_session.execute(select(func.count()).select_from(Friendship))
    return result.scalar_one()


@pytest.fixture
async def users(make_user):
    """Three users with no relationships."""
    return {
        "alice": await make_user("alice"),
        "bob": await make_user("bob"),
        "carol": await make_user("carol"),
    }


class TestSendRequest:
    """Tests for FriendGraph.send_request."""

    async def test_creates_pending_request(self, db_session, users) -> None:
        """Test that a request starts pending and owned by the sender."""
        graph = FriendGraph(db_session)

        friendship = await graph.send_request(users["alice"].id, users["bob"].id)

        assert friendship.id is not None
        assert friendship.requester_id == users["alice"].id
        assert friendship.addressee_id == users["bob"].id
        assert friendship.status is FriendshipStatus.PENDING
        assert (friendship.user_low_id, friendship.user_high_id) == (
            min(users["alice"].id, users["bob"].id),
            max(users["alice"].id, users["bob"].id),
        )

    async def test_self_request_rejected(self, db_session, users) -> None:
        """Test that users cannot befriend themselves."""
        graph = FriendGraph(db_session)

        with pytest.raises(SelfReferenceError):
            await graph.send_request(users["alice"].id, users["alice"].id)

        assert issubclass(SelfReferenceError, ValidationError)
        assert await count_friendships(db_session) == 0

    async def test_unknown_target_rejected(self, db_session, users) -> None:
        """Test that requests to missing users fail NotFound."""
        with pytest.raises(NotFoundError):
            await FriendGraph(db_session).send_request(users["alice"].id, 9999)

    async def test_duplicate_same_direction_rejected(self, db_session, users) -> None:
        """Test that repeating a request fails AlreadyExists."""
        graph = FriendGraph(db_session)
        await graph.send_request(users["alice"].id, users["bob"].id)

        with pytest.raises(AlreadyExistsError):
            await graph.send_request(users["alice"].id, users["bob"].id)

        assert await count_friendships(db_session) == 1

    async def test_duplicate_reverse_direction_rejected(self, db_session, users) -> None:
        """Test that the other user cannot open a second row for the pair."""
        graph = FriendGraph(db_session)
        await graph.send_request(users["alice"].id, users["bob"].id)

        with pytest.raises(AlreadyExistsError):
            await graph.send_request(users["bob"].id, users["alice"].id)

        assert await count_friendships(db_session) == 1

    async def test_request_to_existing_friend_rejected(self, db_session, users) -> None:
        """Test that accepted friendships also block new requests."""
        graph = FriendGraph(db_session)
        friendship = await graph.send_request(users["alice"].id, users["bob"].id)
        await graph.respond(friendship.id, users["bob"].id, FriendAction.ACCEPT)

        with pytest.raises(AlreadyExistsError):
            await graph.send_request(users["bob"].id, users["alice"].id)


class TestRespond:
    """Tests for FriendGraph.respond."""

    async def test_accept(self, db_session, users) -> None:
        """Test that the addressee can accept."""
        graph = FriendGraph(db_session, clock=lambda: NOW)
        friendship = await graph.send_request(users["alice"].id, users["bob"].id)

        result = await graph.respond(friendship.id, users["bob"].id, FriendAction.ACCEPT)

        assert result is not None
        assert result.status is FriendshipStatus.ACCEPTED
        assert await graph.are_friends(users["alice"].id, users["bob"].id)
        assert await graph.are_friends(users["bob"].id, users["alice"].id)

    async def test_requester_cannot_accept_own_request(self, db_session, users) -> None:
        """Test that only the addressee may respond."""
        graph = FriendGraph(db_session)
        friendship = await graph.send_request(users["alice"].id, users["bob"].id)

        with pytest.raises(NotFoundError):
            await graph.respond(friendship.id, users["alice"].id, FriendAction.ACCEPT)

        assert not await graph.are_friends(users["alice"].id, users["bob"].id)

    async def test_third_party_cannot_respond(self, db_session, users) -> None:
        """Test that unrelated users get NotFound."""
        graph = FriendGraph(db_session)
        friendship = await graph.send_request(users["alice"].id, users["bob"].id)

        with pytest.raises(NotFoundError):
            await graph.respond(friendship.id, users["carol"].id, FriendAction.REJECT)

    async def test_unknown_request(self, db_session, users) -> None:
        """Test that responding to a missing request fails NotFound."""
        with pytest.raises(NotFoundError):
            await FriendGraph(db_session).respond(424242, users["bob"].id, FriendAction.ACCEPT)

    async def test_reject_deletes_row_and_allows_rerequest(self, db_session, users) -> None:
        """Test that after a rejection the requester may ask again."""
        graph = FriendGraph(db_session)
        friendship = await graph.send_request(users["alice"].id, users["bob"].id)

        result = await graph.respond(friendship.id, users["bob"].id, FriendAction.REJECT)

        assert result is None
        assert await count_friendships(db_session) == 0

        again = await graph.send_request(users["alice"].id, users["bob"].id)
        assert again.status is FriendshipStatus.PENDING
        assert await count_friendships(db_session) == 1

    async def test_accept_twice_is_noop(self, db_session, users) -> None:
        """Test that accepting an accepted friendship changes nothing."""
        graph = FriendGraph(db_session)
        friendship = await graph.send_request(users["alice"].id, users["bob"].id)
        await graph.respond(friendship.id, users["bob"].id, FriendAction.ACCEPT)

        result = await graph.respond(friendship.id, users["bob"].id, FriendAction.ACCEPT)

        assert result.status is FriendshipStatus.ACCEPTED


class TestQueries:
    """Tests for friend and pending listings."""

    async def test_are_friends_false_for_pending(self, db_session, users) -> None:
        """Test that pending requests are not friendships."""
        graph = FriendGraph(db_session)
        await graph.send_request(users["alice"].id, users["bob"].id)

        assert not await graph.are_friends(users["alice"].id, users["bob"].id)
        assert not await graph.are_friends(users["alice"].id, users["alice"].id)

    async def test_list_friends_both_directions(self, db_session, users) -> None:
        """Test that friends are listed whoever sent the request."""
        graph = FriendGraph(db_session)
        first = await graph.send_request(users["alice"].id, users["bob"].id)
        await graph.respond(first.id, users["bob"].id, FriendAction.ACCEPT)
        second = await graph.send_request(users["carol"].id, users["alice"].id)
        await graph.respond(second.id, users["alice"].id, FriendAction.ACCEPT)

        friends = await graph.list_friends(users["alice"].id)
        bob_friends = await graph.list_friends(users["bob"].id)

        assert [f.username for f in friends] == ["bob", "carol"]
        assert [f.username for f in bob_friends] == ["alice"]

    async def test_list_pending_only_incoming(self, db_session, users) -> None:
        """Test that pending lists only requests addressed to the user."""
        graph = FriendGraph(db_session)
        incoming = await graph.send_request(users["bob"].id, users["alice"].id)
        await graph.send_request(users["alice"].id, users["carol"].id)

        pending = await graph.list_pending(users["alice"].id)

        assert len(pending) == 1
        assert pending[0].request_id == incoming.id
        assert pending[0].from_user.username == "bob"
        assert await graph.list_friends(users["alice"].id) == []

    async def test_friendship_statuses(self, db_session, users) -> None:
        """Test the status map used to annotate search results."""
        graph = FriendGraph(db_session)
        accepted = await graph.send_request(users["bob"].id, users["alice"].id)
        await graph.respond(accepted.id, users["alice"].id, FriendAction.ACCEPT)
        await graph.send_request(users["alice"].id, users["carol"].id)

        statuses = await graph.friendship_statuses(
            users["alice"].id, [users["bob"].id, users["carol"].id, users["alice"].id]
        )

        assert statuses == {
            users["bob"].id: FriendshipStatus.ACCEPTED,
            users["carol"].id: FriendshipStatus.PENDING,
        }
        assert await graph.friendship_statuses(users["alice"].id, []) == {}


class TestRedeemInvite:
    """Tests for FriendGraph.redeem_invite."""

    async def add_invite(self, db_session, user, expires_at) -> Invite:
        invite = Invite(user_id=user.id, token=f"tok-{user.username}", expires_at=expires_at)
        db_session.add(invite)
        await db_session.flush()
        return invite

    async def test_creates_accepted_friendship(self, db_session, users) -> None:
        """Test that a valid invite links both users without a pending step."""
        invite = await self.add_invite(db_session, users["alice"], NOW + timedelta(days=7))
        graph = FriendGraph(db_session, clock=lambda: NOW)

        assert await graph.redeem_invite(invite.token, users["bob"].id) is True

        assert await graph.are_friends(users["alice"].id, users["bob"].id)
        assert await graph.are_friends(users["bob"].id, users["alice"].id)
        assert await graph.list_pending(users["alice"].id) == []
        assert await graph.list_pending(users["bob"].id) == []
        assert await count_friendships(db_session) == 1

    async def test_expired_invite_skipped(self, db_session, users) -> None:
        """Test that expired invites do nothing and do not raise."""
        invite = await self.add_invite(db_session, users["alice"], NOW - timedelta(seconds=1))
        graph = FriendGraph(db_session, clock=lambda: NOW)

        assert await graph.redeem_invite(invite.token, users["bob"].id) is False
        assert not await graph.are_friends(users["alice"].id, users["bob"].id)

    async def test_unknown_invite_skipped(self, db_session, users) -> None:
        """Test that unknown tokens do nothing and do not raise."""
        assert await FriendGraph(db_session).redeem_invite("nope", users["bob"].id) is False
        assert await count_friendships(db_session) == 0

    async def test_own_invite_skipped(self, db_session, users) -> None:
        """Test that redeeming your own invite does nothing."""
        invite = await self.add_invite(db_session, users["alice"], NOW + timedelta(days=1))
        graph = FriendGraph(db_session, clock=lambda: NOW)

        assert await graph.redeem_invite(invite.token, users["alice"].id) is False

    async def test_upgrades_pending_request(self, db_session, users) -> None:
        """Test that an invite accepts a request already pending between the pair."""
        invite = await self.add_invite(db_session, users["alice"], NOW + timedelta(days=1))
        graph = FriendGraph(db_session, clock=lambda: NOW)
        await graph.send_request(users["bob"].id, users["alice"].id)

        assert await graph.redeem_invite(invite.token, users["bob"].id) is True
        assert await graph.are_friends(users["alice"].id, users["bob"].id)
        assert await count_friendships(db_session) == 1


class TestVisibilityGate:
    """Tests for VisibilityGate.is_visible."""

    async def test_self_visible(self, db_session, users) -> None:
        """Test that users always see themselves."""
        gate = VisibilityGate(db_session)
        assert await gate.is_visible(users["alice"].id, users["alice"].id)

    async def test_strangers_not_visible(self, db_session, users) -> None:
        """Test that unrelated users are hidden."""
        gate = VisibilityGate(db_session)
        assert not await gate.is_visible(users["alice"].id, users["bob"].id)

    async def test_follows_friendship_lifecycle(self, db_session, users) -> None:
        """Test visibility through request, acceptance and rejection."""
        graph = FriendGraph(db_session)
        gate = VisibilityGate(db_session, friends=graph)

        friendship = await graph.send_request(users["alice"].id, users["bob"].id)
        assert not await gate.is_visible(users["bob"].id, users["alice"].id)

        await graph.respond(friendship.id, users["bob"].id, FriendAction.ACCEPT)
        assert await gate.is_visible(users["bob"].id, users["alice"].id)
        assert await gate.is_visible(users["alice"].id, users["bob"].id)
        assert not await gate.is_visible(users["carol"].id, users["alice"].id)
