"""Event ORM model covering both disrespects and wins."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from disrespect_tracker.database import Base
from disrespect_tracker.utils.weeks import utcnow

if TYPE_CHECKING:
    from disrespect_tracker.models.user import User


class EventKind(str, enum.Enum):
    """The two parallel event taxonomies."""

    DISRESPECT = "disrespect"
    WIN = "win"


class Event(Base):
    """A single logged disrespect or win, bucketed into its week."""

    __tablename__ = "events"
    __table_args__ = (Index("ix_events_user_kind_week", "user_id", "kind", "week_start"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    kind: Mapped[EventKind] = mapped_column(
        Enum(
            EventKind,
            native_enum=False,
            length=20,
            values_callable=lambda kinds: [k.value for k in kinds],
        )
    )
    category: Mapped[str] = mapped_column(String(50))
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_shared: Mapped[bool] = mapped_column(default=False)
    # Monday 00:00, never user-set
    week_start: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    user: Mapped[User] = relationship(back_populates="events")
