"""Tests for friend API endpoints."""

from datetime import UTC, datetime

from httpx import AsyncClient

from disrespect_tracker.models.event import Event, EventKind
from disrespect_tracker.models.friendship import Friendship, FriendshipStatus
from disrespect_tracker.utils.weeks import week_start


async def befriend(db_session, user_a, user_b, status=FriendshipStatus.ACCEPTED) -> Friendship:
    friendship = Friendship.between(user_a.id, user_b.id, status=status)
    db_session.add(friendship)
    await db_session.flush()
    return friendship


class TestListFriends:
    """Tests for GET /api/friends."""

    async def test_requires_auth(self, client: AsyncClient) -> None:
        """Test that anonymous requests are refused."""
        response = await client.get("/api/friends")
        assert response.status_code == 401

    async def test_empty(self, db_client: AsyncClient, make_user, auth_headers) -> None:
        """Test a user with no connections."""
        alice = await make_user("alice")

        response = await db_client.get("/api/friends", headers=await auth_headers(alice))

        assert response.status_code == 200
        assert response.json() == {"friends": [], "pending_requests": []}

    async def test_friends_and_pending(
        self, db_client: AsyncClient, db_session, make_user, auth_headers
    ) -> None:
        """Test that accepted friends and incoming requests are listed separately."""
        alice = await make_user("alice")
        bob = await make_user("bob", name="Bob B")
        carol = await make_user("carol")
        dave = await make_user("dave")
        await befriend(db_session, bob, alice)
        incoming = await befriend(db_session, carol, alice, status=FriendshipStatus.PENDING)
        await befriend(db_session, alice, dave, status=FriendshipStatus.PENDING)

        response = await db_client.get("/api/friends", headers=await auth_headers(alice))

        data = response.json()
        assert data["friends"] == [{"id": bob.id, "username": "bob", "name": "Bob B"}]
        assert len(data["pending_requests"]) == 1
        assert data["pending_requests"][0]["id"] == incoming.id
        assert data["pending_requests"][0]["from_user"]["username"] == "carol"


class TestSendRequest:
    """Tests for POST /api/friends/requests."""

    async def test_send(self, db_client: AsyncClient, make_user, auth_headers) -> None:
        """Test sending a request."""
        alice = await make_user("alice")
        bob = await make_user("bob")

        response = await db_client.post(
            "/api/friends/requests", json={"friend_id": bob.id}, headers=await auth_headers(alice)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["friend"]["id"] == bob.id

    async def test_send_to_self(self, db_client: AsyncClient, make_user, auth_headers) -> None:
        """Test that befriending yourself is a bad request."""
        alice = await make_user("alice")

        response = await db_client.post(
            "/api/friends/requests", json={"friend_id": alice.id}, headers=await auth_headers(alice)
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot add yourself"

    async def test_send_to_unknown_user(
        self, db_client: AsyncClient, make_user, auth_headers
    ) -> None:
        """Test that unknown targets are not found."""
        alice = await make_user("alice")

        response = await db_client.post(
            "/api/friends/requests", json={"friend_id": 9999}, headers=await auth_headers(alice)
        )

        assert response.status_code == 404

    async def test_send_duplicate_either_direction(
        self, db_client: AsyncClient, make_user, auth_headers
    ) -> None:
        """Test that a second request for the same pair conflicts."""
        alice = await make_user("alice")
        bob = await make_user("bob")

        first = await db_client.post(
            "/api/friends/requests", json={"friend_id": bob.id}, headers=await auth_headers(alice)
        )
        again = await db_client.post(
            "/api/friends/requests", json={"friend_id": bob.id}, headers=await auth_headers(alice)
        )
        reverse = await db_client.post(
            "/api/friends/requests", json={"friend_id": alice.id}, headers=await auth_headers(bob)
        )

        assert first.status_code == 201
        assert again.status_code == 409
        assert reverse.status_code == 409


class TestRespond:
    """Tests for PATCH /api/friends/requests/{id}."""

    async def test_accept(
        self, db_client: AsyncClient, db_session, make_user, auth_headers
    ) -> None:
        """Test that the addressee can accept."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        request = await befriend(db_session, alice, bob, status=FriendshipStatus.PENDING)

        response = await db_client.patch(
            f"/api/friends/requests/{request.id}",
            json={"action": "accept"},
            headers=await auth_headers(bob),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "accepted"
        assert data["friend"]["id"] == alice.id

        friends = await db_client.get("/api/friends", headers=await auth_headers(alice))
        assert [f["id"] for f in friends.json()["friends"]] == [bob.id]

    async def test_reject(
        self, db_client: AsyncClient, db_session, make_user, auth_headers
    ) -> None:
        """Test that rejecting removes the request."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        request = await befriend(db_session, alice, bob, status=FriendshipStatus.PENDING)

        response = await db_client.patch(
            f"/api/friends/requests/{request.id}",
            json={"action": "reject"},
            headers=await auth_headers(bob),
        )

        assert response.status_code == 200
        assert response.json() == {"id": None, "status": None, "friend": None}
        assert await db_session.get(Friendship, request.id) is None

    async def test_requester_cannot_respond(
        self, db_client: AsyncClient, db_session, make_user, auth_headers
    ) -> None:
        """Test that the sender cannot accept their own request."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        request = await befriend(db_session, alice, bob, status=FriendshipStatus.PENDING)

        response = await db_client.patch(
            f"/api/friends/requests/{request.id}",
            json={"action": "accept"},
            headers=await auth_headers(alice),
        )

        assert response.status_code == 404
        assert request.status is FriendshipStatus.PENDING

    async def test_invalid_action(
        self, db_client: AsyncClient, db_session, make_user, auth_headers
    ) -> None:
        """Test that unknown actions fail validation."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        request = await befriend(db_session, alice, bob, status=FriendshipStatus.PENDING)

        response = await db_client.patch(
            f"/api/friends/requests/{request.id}",
            json={"action": "maybe"},
            headers=await auth_headers(bob),
        )

        assert response.status_code == 422


class TestFriendEvents:
    """Tests for GET /api/friends/{id}/events/{kind}."""

    async def add_event(self, db_session, user, is_shared, category="ghosted") -> Event:
        now = datetime.now(UTC)
        event = Event(
            user_id=user.id,
            kind=EventKind.DISRESPECT,
            category=category,
            is_shared=is_shared,
            week_start=week_start(now, tz=UTC),
            created_at=now,
        )
        db_session.add(event)
        await db_session.flush()
        return event

    async def test_not_friends_forbidden(
        self, db_client: AsyncClient, db_session, make_user, auth_headers
    ) -> None:
        """Test that strangers and pending requests get 403."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        await befriend(db_session, alice, bob, status=FriendshipStatus.PENDING)
        await self.add_event(db_session, bob, is_shared=True)

        response = await db_client.get(
            f"/api/friends/{bob.id}/events/disrespect", headers=await auth_headers(alice)
        )

        assert response.status_code == 403

    async def test_unknown_user_forbidden(
        self, db_client: AsyncClient, make_user, auth_headers
    ) -> None:
        """Test that unknown users look the same as strangers."""
        alice = await make_user("alice")

        response = await db_client.get(
            "/api/friends/9999/events/disrespect", headers=await auth_headers(alice)
        )

        assert response.status_code == 403

    async def test_friend_sees_only_shared(
        self, db_client: AsyncClient, db_session, make_user, auth_headers
    ) -> None:
        """Test that friends see shared events and nothing else."""
        alice = await make_user("alice")
        bob = await make_user("bob")
        await befriend(db_session, bob, alice)
        shared = await self.add_event(db_session, bob, is_shared=True, category="credit_theft")
        await self.add_event(db_session, bob, is_shared=False)

        response = await db_client.get(
            f"/api/friends/{bob.id}/events/disrespect", headers=await auth_headers(alice)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["friend"]["username"] == "bob"
        assert [e["id"] for e in data["events"]] == [shared.id]
        assert data["events"][0]["category"] == "credit_theft"
