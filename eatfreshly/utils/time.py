"""Time window helpers used for 'today' and date-range queries."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def today_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the UTC midnights that start ``now``'s day and the day after.

    Orders are stored with UTC timestamps, so "today" is a UTC day as well.
    """
    now = now or utcnow()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start, end


def month_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the first instant of this month and of the next one."""
    now = now or utcnow()
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def date_range_window(start_date: date | None, end_date: date | None) -> tuple[datetime | None, datetime | None]:
    """Turn inclusive calendar dates into a half-open UTC datetime window."""
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc) if start_date else None
    end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc) if end_date else None
    return start, end
