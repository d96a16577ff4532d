"""Date helpers used by the order, customer and product screens."""
from datetime import datetime, date, timedelta
from typing import Optional, Union

import dateparser

DateLike = Union[datetime, date, str, None]


def _naive_local(dt: datetime) -> datetime:
    # stored timestamps are naive local time
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def to_datetime(value: DateLike) -> Optional[datetime]:
    """Coerce a stored timestamp (datetime, date or loose string) to a datetime.

    Returns None for empty or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _naive_local(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            parsed = dateparser.parse(value)
        return _naive_local(parsed) if parsed is not None else None
    return None


def format_date(value: DateLike) -> str:
    """Format as e.g. 'Jun 2, 2025, 05:11 PM' (day not zero-padded)."""
    dt = to_datetime(value)
    if dt is None:
        return "" if not value else str(value)
    return f"{dt:%b} {dt.day}, {dt:%Y, %I:%M %p}"


def relative_time(value: DateLike, now: Optional[datetime] = None) -> str:
    dt = to_datetime(value)
    if dt is None:
        return "" if not value else str(value)
    now = _naive_local(now) if now else datetime.now()
    diff_seconds = int((now - dt).total_seconds())

    if diff_seconds < 60:
        return "just now"
    minutes = diff_seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return format_date(dt)


def start_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)


def end_of_day(d: date) -> datetime:
    return start_of_day(d) + timedelta(days=1) - timedelta(microseconds=1)
