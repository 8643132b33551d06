from __future__ import annotations

from calendar import monthrange
from datetime import date, timedelta
from typing import Iterator, Optional


def contains(start: Optional[date], end: Optional[date], day: date) -> bool:
    """Inclusive containment. A missing bound is treated as unbounded."""
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def overlaps(
    a_start: Optional[date],
    a_end: Optional[date],
    b_start: Optional[date],
    b_end: Optional[date],
) -> bool:
    if a_start is not None and b_end is not None and a_start > b_end:
        return False
    if b_start is not None and a_end is not None and b_start > a_end:
        return False
    return True


def clamp_range(
    start: date,
    end: date,
    lower: Optional[date],
    upper: Optional[date],
) -> tuple[date, date] | None:
    """Intersect [start, end] with [lower, upper]; ``None`` when they do not meet."""
    s = max(start, lower) if lower is not None else start
    e = min(end, upper) if upper is not None else end
    if e < s:
        return None
    return s, e


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def iter_weeks(start: date, weeks: int) -> Iterator[date]:
    first = week_start(start)
    for i in range(max(0, int(weeks))):
        yield first + timedelta(weeks=i)


def week_key(day: date) -> str:
    iso = week_start(day).isocalendar()
    return f"{iso[0]}-W{iso[1]:02d}"


def month_bounds(day: date) -> tuple[str, date, date]:
    last_day = monthrange(day.year, day.month)[1]
    start = date(day.year, day.month, 1)
    end = date(day.year, day.month, last_day)
    return f"{day.year}-{day.month:02d}", start, end


def iter_months(start: date, months: int) -> Iterator[tuple[str, date, date]]:
    year, month = start.year, start.month
    for _ in range(max(0, int(months))):
        yield month_bounds(date(year, month, 1))
        month += 1
        if month > 12:
            year, month = year + 1, 1


def working_days_between(start: date, end: date) -> int:
    """Monday-Friday count over the inclusive range."""
    if end < start:
        return 0
    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    for i in range(remainder):
        if (start + timedelta(days=full_weeks * 7 + i)).weekday() < 5:
            count += 1
    return count


__all__ = [
    "contains",
    "overlaps",
    "clamp_range",
    "week_start",
    "iter_weeks",
    "week_key",
    "month_bounds",
    "iter_months",
    "working_days_between",
]
