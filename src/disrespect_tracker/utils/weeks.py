"""Calendar arithmetic for bucketing events into Monday-aligned weeks.

Everything here is a pure function of its arguments (and of the current time
where ``now`` is omitted), so it can be called freely from services, routes
and tests.
"""

from datetime import UTC, datetime, time, timedelta, tzinfo

WEEK = timedelta(days=7)

# Fixed English abbreviations; strftime("%b") follows the process locale
MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive datetimes for values stored as UTC, so naive input
    is assumed to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _default_tz() -> tzinfo:
    # Imported lazily so the calendar helpers stay usable without settings
    from disrespect_tracker.config import get_settings

    return get_settings().tzinfo


def week_start(instant: datetime, tz: tzinfo | None = None) -> datetime:
    """Return the start of the week containing ``instant``.

    The result is the most recent Monday at or before the local date of
    ``instant``, at midnight in ``tz``. Aware instants are converted into
    ``tz`` first; naive instants are read as local wall-clock time.

    Args:
        instant: Any point in time.
        tz: Zone deciding where midnight falls. Defaults to the configured
            ``WEEK_TIMEZONE``.

    Returns:
        Aware datetime for Monday 00:00:00 in ``tz``.
    """
    tz = tz or _default_tz()
    local = instant.astimezone(tz) if instant.tzinfo is not None else instant.replace(tzinfo=tz)
    local_date = local.date()
    # weekday() is 0 for Monday and 6 for Sunday, so Sunday steps back six days
    monday = local_date - timedelta(days=local_date.weekday())
    return datetime.combine(monday, time.min, tzinfo=tz)


def recent_weeks(
    count: int,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[datetime]:
    """Return the starts of the ``count`` most recent weeks, newest first.

    Element ``i`` is exactly ``i`` weeks before the start of the current week.
    """
    if count < 0:
        raise ValueError("count must not be negative")
    current = week_start(now or utcnow(), tz)
    return [current - i * WEEK for i in range(count)]


def lookback_cutoff(
    weeks_back: int,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> datetime:
    """Start of the week ``weeks_back`` weeks ago; events on or after it are in range."""
    if weeks_back < 0:
        raise ValueError("weeks_back must not be negative")
    return week_start((now or utcnow()) - weeks_back * WEEK, tz)


def format_week_label(start: datetime) -> str:
    """Format a week start as ``"Week of Dec 23"``.

    The label carries no year, so weeks a year apart share a label.
    """
    return f"Week of {MONTH_ABBREVIATIONS[start.month - 1]} {start.day}"
