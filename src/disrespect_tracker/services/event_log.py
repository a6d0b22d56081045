"""Recording and retrieving a user's weekly disrespects and wins."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from disrespect_tracker.database import get_db
from disrespect_tracker.models.event import Event, EventKind
from disrespect_tracker.services.errors import ForbiddenError, InvalidCategoryError
from disrespect_tracker.services.visibility import VisibilityGate
from disrespect_tracker.utils.weeks import (
    ensure_utc,
    format_week_label,
    lookback_cutoff,
    utcnow,
    week_start,
)

logger = logging.getLogger(__name__)


class CategoryInfo(NamedTuple):
    """Display metadata for a category."""

    label: str
    emoji: str


CATEGORIES: dict[EventKind, dict[str, CategoryInfo]] = {
    EventKind.DISRESPECT: {
        "credit_theft": CategoryInfo("Credit Theft", "🏴‍☠️"),
        "thrown_under_bus": CategoryInfo("Thrown Under Bus", "🚌"),
        "ghosted": CategoryInfo("Ghosted", "👻"),
        "general_clowning": CategoryInfo("General Clowning", "🤡"),
    },
    EventKind.WIN: {
        "clutch_moment": CategoryInfo("Clutch Moment", "⚡"),
        "had_your_back": CategoryInfo("Had Your Back", "🛡️"),
        "real_talk": CategoryInfo("Real Talk", "💬"),
        "goat_behavior": CategoryInfo("GOAT Behavior", "🐐"),
    },
}


def validate_category(kind: EventKind, category: str) -> str:
    """Return ``category`` if it belongs to ``kind``, else raise InvalidCategoryError."""
    if category not in CATEGORIES[kind]:
        raise InvalidCategoryError(kind.value, category)
    return category


@dataclass
class WeekBucket:
    """Events falling into one calendar week, with per-category counts."""

    week_start: datetime
    label: str
    events: list[Event] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.events)


class EventLog:
    """Domain operations on a user's event history.

    Args:
        db: Session used for every store read and write.
        visibility: Gate consulted before cross-user reads.
        clock: Callable returning the current time; tests pin it.
    """

    def __init__(
        self,
        db: AsyncSession,
        visibility: VisibilityGate | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.visibility = visibility or VisibilityGate(db)
        self.clock = clock

    async def record_event(
        self,
        user_id: int,
        kind: EventKind,
        category: str,
        note: str | None = None,
        is_shared: bool = False,
    ) -> Event:
        """Log a new event for ``user_id`` in the current week.

        Raises:
            InvalidCategoryError: If ``category`` is not one of ``kind``'s categories.
        """
        validate_category(kind, category)

        now = self.clock()
        event = Event(
            user_id=user_id,
            kind=kind,
            category=category,
            note=note.strip() if note and note.strip() else None,
            is_shared=is_shared,
            week_start=ensure_utc(week_start(now)),
            created_at=ensure_utc(now),
        )
        self.db.add(event)
        await self.db.flush()

        logger.info("User %s logged %s '%s'", user_id, kind.value, category)
        return event

    async def list_own_events(
        self,
        user_id: int,
        kind: EventKind,
        weeks_back: int = 8,
    ) -> Sequence[Event]:
        """List ``user_id``'s ``kind`` events from the last ``weeks_back`` weeks, newest first."""
        return await self._query_events(user_id, kind, weeks_back, shared_only=False)

    async def list_shared_events(
        self,
        viewer_id: int,
        target_user_id: int,
        kind: EventKind,
        weeks_back: int = 8,
    ) -> Sequence[Event]:
        """List the events ``target_user_id`` has shared, as seen by ``viewer_id``.

        Raises:
            ForbiddenError: If the viewer is not allowed to see the target's events.
        """
        if not await self.visibility.is_visible(viewer_id, target_user_id):
            raise ForbiddenError("Not friends")
        return await self._query_events(target_user_id, kind, weeks_back, shared_only=True)

    async def _query_events(
        self,
        user_id: int,
        kind: EventKind,
        weeks_back: int,
        shared_only: bool,
    ) -> Sequence[Event]:
        cutoff = ensure_utc(lookback_cutoff(weeks_back, now=self.clock()))

        query = select(Event).where(
            Event.user_id == user_id,
            Event.kind == kind,
            Event.week_start >= cutoff,
        )
        if shared_only:
            query = query.where(Event.is_shared.is_(True))
        query = query.order_by(Event.created_at.desc(), Event.id.desc())

        result = await self.db.execute(query)
        return result.scalars().all()


def weekly_summary(
    events: Sequence[Event],
    kind: EventKind,
    weeks: Sequence[datetime],
) -> list[WeekBucket]:
    """Group ``events`` into the given week starts.

    Events outside every bucket are dropped. Counts include every category of
    ``kind`` so empty categories show up as zero.
    """
    buckets = {
        ensure_utc(start): WeekBucket(
            week_start=start,
            label=format_week_label(start),
            counts=dict.fromkeys(CATEGORIES[kind], 0),
        )
        for start in weeks
    }
    for event in events:
        bucket = buckets.get(ensure_utc(event.week_start))
        if bucket is None:
            continue
        bucket.events.append(event)
        bucket.counts[event.category] = bucket.counts.get(event.category, 0) + 1
    return list(buckets.values())


async def get_event_log(db: AsyncSession = Depends(get_db)) -> EventLog:
    """Dependency that provides an EventLog bound to the request session."""
    return EventLog(db)
