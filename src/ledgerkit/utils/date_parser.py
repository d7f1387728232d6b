"""Date parsing utilities."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = ["this-month", "this-year", "this-week", "last-month", "last-year", "last-week"]


def _relative_date(date_str: str, today: date) -> Optional[date]:
    """Resolve relative phrases such as 'yesterday' or 'last month'."""
    fixed = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in fixed:
        return fixed[date_str]

    direction, _, period = date_str.partition(" ")
    if direction == "this":
        if period == "month":
            return today.replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1)
        if period == "week":
            return today - timedelta(days=today.weekday())
    elif direction == "last":
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        if period == "week":
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)
        if period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)
    return None


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: Any) -> datetime:
    """Parse a date, datetime or string into a naive UTC timestamp.

    Strings carrying a time ("2024-01-15T10:30:00Z") keep it; plain and
    relative dates resolve to midnight.

    Raises:
        ValueError: If the value cannot be interpreted as a point in time
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Could not parse timestamp {value!r}")

    relative = _relative_date(value.strip().lower(), date.today())
    if relative is not None:
        return datetime.combine(relative, time.min)

    try:
        return to_naive_utc(date_parser.isoparse(value.strip()))
    except (ValueError, OverflowError):
        pass
    try:
        return to_naive_utc(date_parser.parse(value.strip()))
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse timestamp '{value}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: One of ``PERIODS``

    Returns:
        Tuple of (start_date, end_date); "this" periods end today

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)
    if period == "this-year":
        return (today.replace(month=1, day=1), today)
    if period == "this-week":
        return (today - timedelta(days=today.weekday()), today)
    if period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        return (start_date, today.replace(day=1) - timedelta(days=1))
    if period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return (start_date, today.replace(month=1, day=1) - timedelta(days=1))
    if period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
