"""Friendship ORM model."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from disrespect_tracker.database import Base
from disrespect_tracker.utils.weeks import utcnow

if TYPE_CHECKING:
    from disrespect_tracker.models.user import User


class FriendshipStatus(str, enum.Enum):
    """Lifecycle state of a friendship row."""

    PENDING = "pending"
    ACCEPTED = "accepted"


def canonical_pair(user_a_id: int, user_b_id: int) -> tuple[int, int]:
    """Return the unordered pair key for two users (lower id first)."""
    return (user_a_id, user_b_id) if user_a_id <= user_b_id else (user_b_id, user_a_id)


class Friendship(Base):
    """Relationship between two users.

    The requester owns the row; only the addressee may accept or reject it.
    ``user_low_id``/``user_high_id`` hold the canonical pair so the unique
    constraint allows one row per unordered pair regardless of direction.
    """

    __tablename__ = "friendships"
    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_friendship_pair"),
        CheckConstraint("user_low_id < user_high_id", name="ck_friendship_pair_ordered"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    requester_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    addressee_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    user_low_id: Mapped[int] = mapped_column(index=True)
    user_high_id: Mapped[int] = mapped_column(index=True)
    status: Mapped[FriendshipStatus] = mapped_column(
        Enum(
            FriendshipStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=FriendshipStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    requester: Mapped[User] = relationship(foreign_keys=[requester_id])
    addressee: Mapped[User] = relationship(foreign_keys=[addressee_id])

    @classmethod
    def between(
        cls,
        requester_id: int,
        addressee_id: int,
        status: FriendshipStatus = FriendshipStatus.PENDING,
    ) -> Friendship:
        """Build a row for ``requester_id`` -> ``addressee_id`` with its pair key filled in."""
        low, high = canonical_pair(requester_id, addressee_id)
        return cls(
            requester_id=requester_id,
            addressee_id=addressee_id,
            user_low_id=low,
            user_high_id=high,
            status=status,
        )

    def other_user_id(self, user_id: int) -> int:
        """Return the id of the user on the other side of this friendship."""
        return self.addressee_id if self.requester_id == user_id else self.requester_id
