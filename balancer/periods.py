"""Calendar arithmetic for milestone periods.

Every bound is treated as a calendar date: timestamps such as
'2026-02-01T00:00:00Z' are cut to their date part before any arithmetic,
and both ends of a period are inclusive.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date, datetime, timedelta

DateLike = str | date


def to_date(value: DateLike) -> date:
    """Normalize a date string, date or datetime to a calendar date.

    Malformed strings raise ValueError from date.fromisoformat.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip().split("T")[0])


def total_days(period_start: DateLike, period_end: DateLike) -> int:
    """Inclusive number of days in the period (1 when start == end)."""
    return (to_date(period_end) - to_date(period_start)).days + 1


def remaining_days(period_end: DateLike, today: date | None = None) -> int:
    """Inclusive days from today through period_end, never negative."""
    if today is None:
        today = date.today()
    return max(0, (to_date(period_end) - to_date(today)).days + 1)


class DateRange:
    """Inclusive range of ISO date strings.

    Iterating is lazy and can be repeated; each pass walks the range afresh.
    """

    def __init__(self, period_start: DateLike, period_end: DateLike) -> None:
        self.start = to_date(period_start)
        self.end = to_date(period_end)

    def __iter__(self) -> Iterator[str]:
        current = self.start
        while current <= self.end:
            yield current.isoformat()
            current += timedelta(days=1)

    def __len__(self) -> int:
        return max(0, (self.end - self.start).days + 1)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, (str, date)):
            return False
        return self.start <= to_date(value) <= self.end

    def __repr__(self) -> str:
        return f"DateRange({self.start.isoformat()!r}, {self.end.isoformat()!r})"


def date_range(period_start: DateLike, period_end: DateLike) -> DateRange:
    return DateRange(period_start, period_end)


def is_in_period(value: DateLike, period_start: DateLike, period_end: DateLike) -> bool:
    return to_date(period_start) <= to_date(value) <= to_date(period_end)


def current_month_period(today: date | None = None) -> tuple[str, str]:
    """First and last day of today's month."""
    if today is None:
        today = date.today()
    last = calendar.monthrange(today.year, today.month)[1]
    return (
        date(today.year, today.month, 1).isoformat(),
        date(today.year, today.month, last).isoformat(),
    )


def format_month(month: str) -> str:
    """'2026-02' -> 'February 2026'."""
    year, mon = month.split("-")[:2]
    return f"{calendar.month_name[int(mon)]} {int(year)}"
