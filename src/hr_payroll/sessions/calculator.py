"""Working-hour arithmetic for work sessions.

All figures are hours rounded to 2 decimals. Negative spans clamp to zero.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from ..common.datetime_utils import floor_minutes
from ..core.constants import STANDARD_WORKDAY_HOURS
from .model import WorkSession


def calculate_working_hours(start: datetime, end: datetime, break_minutes: float = 0) -> float:
    worked = max(0, floor_minutes(start, end) - float(break_minutes or 0))
    return round(worked / 60, 2)


def calculate_overtime(working_hours: float, standard_hours: float = STANDARD_WORKDAY_HOURS) -> float:
    return round(max(0.0, float(working_hours) - standard_hours), 2)


def _break_minutes(session: WorkSession, now: datetime) -> int:
    minutes = int(session.total_break_minutes or 0)
    if session.is_active and session.on_break:
        # time spent in the running break does not count either
        minutes += max(0, floor_minutes(session.break_start_time, now))
    return minutes


def session_working_hours(session: WorkSession, now: datetime) -> float:
    """Frozen hours for closed sessions, a live estimate up to `now` for active ones."""
    if session.is_active:
        return calculate_working_hours(session.start_time, now, _break_minutes(session, now))
    return round(float(session.working_hours or 0), 2)


def session_working_minutes(session: WorkSession, now: datetime) -> int:
    """Unrounded worked minutes, so per-session rounding does not add up across sessions."""
    end = now if session.is_active else session.end_time
    if end is None:
        return int(round(float(session.working_hours or 0) * 60))
    return max(0, floor_minutes(session.start_time, end) - _break_minutes(session, now))


def total_working_hours(sessions: Iterable[WorkSession], now: datetime) -> float:
    return round(sum(session_working_hours(s, now) for s in sessions), 2)


def session_overtime_hours(session: WorkSession, now: datetime) -> float:
    if session.is_active:
        return calculate_overtime(session_working_hours(session, now))
    return round(float(session.overtime_hours or 0), 2)


def total_overtime_hours(sessions: Iterable[WorkSession], now: datetime) -> float:
    return round(sum(session_overtime_hours(s, now) for s in sessions), 2)
