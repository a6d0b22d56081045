"""Pydantic schemas for event (disrespect and win) API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from disrespect_tracker.models.event import EventKind
from disrespect_tracker.schemas.common import UTCDateTime
from disrespect_tracker.schemas.user import UserSummary


class EventCreate(BaseModel):
    """Schema for logging a new event."""

    category: str = Field(description="Category key valid for the event kind")
    note: str | None = Field(default=None, max_length=500, description="Optional note")
    is_shared: bool = Field(default=False, description="Share with accepted friends")


class EventResponse(BaseModel):
    """Response schema for a logged event."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Event ID")
    user_id: int = Field(description="Owner user ID")
    kind: EventKind = Field(description="disrespect or win")
    category: str = Field(description="Category key")
    note: str | None = Field(default=None, description="Optional note")
    is_shared: bool = Field(description="Whether friends can see this event")
    week_start: UTCDateTime = Field(description="Start of the week the event belongs to")
    created_at: UTCDateTime = Field(description="When the event was logged")


class EventListResponse(BaseModel):
    """Events of one kind within a lookback window."""

    kind: EventKind = Field(description="disrespect or win")
    weeks: int = Field(description="Number of weeks looked back")
    events: list[EventResponse] = Field(default_factory=list, description="Events, newest first")


class WeekBucketResponse(BaseModel):
    """One calendar week of events with per-category counts."""

    week_start: UTCDateTime = Field(description="Monday 00:00 of the week")
    label: str = Field(description='Display label, e.g. "Week of Dec 23"')
    total: int = Field(description="Number of events in the week")
    counts: dict[str, int] = Field(default_factory=dict, description="Event count per category")
    events: list[EventResponse] = Field(default_factory=list, description="Events, newest first")


class WeeklyEventsResponse(BaseModel):
    """Events grouped into recent weeks, most recent week first."""

    kind: EventKind = Field(description="disrespect or win")
    weeks: list[WeekBucketResponse] = Field(default_factory=list, description="Week buckets")


class FriendEventsResponse(EventListResponse):
    """Shared events of a friend."""

    friend: UserSummary = Field(description="Friend whose events are shown")


class CategoryResponse(BaseModel):
    """Display metadata for one category."""

    key: str = Field(description="Category key")
    label: str = Field(description="Human readable label")
    emoji: str = Field(description="Emoji shown with the category")


class CategoryCatalogResponse(BaseModel):
    """All categories, grouped by event kind."""

    disrespect: list[CategoryResponse] = Field(default_factory=list)
    win: list[CategoryResponse] = Field(default_factory=list)
