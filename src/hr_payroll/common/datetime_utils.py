from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Callable, Iterator

Clock = Callable[[], datetime]


def now_local() -> datetime:
    """Current local time.

    Note: Services receive this as their default clock so tests can pass a fixed one.
    """
    return datetime.now()


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_dates(start: date, end: date) -> Iterator[date]:
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def is_weekday(d: date) -> bool:
    return d.weekday() < 5


def inclusive_days(start: date, end: date) -> int:
    return abs((end - start).days) + 1


def floor_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes elapsed between two timestamps (may be negative)."""
    return int((end - start).total_seconds() // 60)
