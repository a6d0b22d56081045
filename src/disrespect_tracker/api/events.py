"""Event (disrespect and win) API endpoints."""

from fastapi import APIRouter, Depends, Query

from disrespect_tracker.config import get_settings
from disrespect_tracker.models.event import EventKind
from disrespect_tracker.schemas.event import (
    CategoryCatalogResponse,
    CategoryResponse,
    EventCreate,
    EventListResponse,
    EventResponse,
    WeekBucketResponse,
    WeeklyEventsResponse,
)
from disrespect_tracker.services.event_log import (
    CATEGORIES,
    EventLog,
    get_event_log,
    weekly_summary,
)
from disrespect_tracker.utils.security import CurrentUser
from disrespect_tracker.utils.weeks import recent_weeks

router = APIRouter(prefix="/events", tags=["events"])

MAX_WEEKS_BACK = 520


def weeks_query(
    weeks: int | None = Query(
        None,
        ge=0,
        le=MAX_WEEKS_BACK,
        description="Number of weeks to look back (0 = current week only)",
    ),
) -> int:
    """Resolve the lookback window, falling back to the configured default."""
    return get_settings().default_weeks_back if weeks is None else weeks


def bucket_to_response(bucket) -> WeekBucketResponse:
    """Convert a WeekBucket into its response schema."""
    return WeekBucketResponse(
        week_start=bucket.week_start,
        label=bucket.label,
        total=bucket.total,
        counts=bucket.counts,
        events=[EventResponse.model_validate(event) for event in bucket.events],
    )


@router.get("/categories", response_model=CategoryCatalogResponse)
async def list_categories() -> CategoryCatalogResponse:
    """List the fixed categories for each event kind."""
    catalog = {
        kind.value: [
            CategoryResponse(key=key, label=info.label, emoji=info.emoji)
            for key, info in categories.items()
        ]
        for kind, categories in CATEGORIES.items()
    }
    return CategoryCatalogResponse(**catalog)


@router.post("/{kind}", response_model=EventResponse, status_code=201)
async def record_event(
    kind: EventKind,
    current_user: CurrentUser,
    event_data: EventCreate,
    event_log: EventLog = Depends(get_event_log),
) -> EventResponse:
    """Log a disrespect or win for the current week.

    The week is derived from the time of logging and cannot be chosen.
    Requires authentication.
    """
    event = await event_log.record_event(
        user_id=current_user.id,
        kind=kind,
        category=event_data.category,
        note=event_data.note,
        is_shared=event_data.is_shared,
    )
    return EventResponse.model_validate(event)


@router.get("/{kind}", response_model=EventListResponse)
async def list_events(
    kind: EventKind,
    current_user: CurrentUser,
    weeks: int = Depends(weeks_query),
    event_log: EventLog = Depends(get_event_log),
) -> EventListResponse:
    """List the current user's events of one kind, newest first.

    Requires authentication.
    """
    events = await event_log.list_own_events(current_user.id, kind, weeks_back=weeks)
    return EventListResponse(
        kind=kind,
        weeks=weeks,
        events=[EventResponse.model_validate(event) for event in events],
    )


@router.get("/{kind}/weekly", response_model=WeeklyEventsResponse)
async def list_weekly_events(
    kind: EventKind,
    current_user: CurrentUser,
    weeks: int = Depends(weeks_query),
    event_log: EventLog = Depends(get_event_log),
) -> WeeklyEventsResponse:
    """Group the current user's events into recent weeks with per-category counts.

    Returns ``weeks + 1`` buckets (the current week plus ``weeks`` earlier ones),
    most recent first. Weeks without events are included with zero counts.
    Requires authentication.
    """
    events = await event_log.list_own_events(current_user.id, kind, weeks_back=weeks)
    buckets = weekly_summary(events, kind, recent_weeks(weeks + 1, now=event_log.clock()))
    return WeeklyEventsResponse(
        kind=kind,
        weeks=[bucket_to_response(bucket) for bucket in buckets],
    )
