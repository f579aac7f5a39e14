from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class WorkSession:
    """One check-in to check-out interval of an employee on a calendar date."""

    session_id: int
    employee_id: int
    work_date: date
    start_time: datetime
    end_time: Optional[datetime] = None
    is_active: bool = True
    break_start_time: Optional[datetime] = None
    break_end_time: Optional[datetime] = None
    total_break_minutes: int = 0
    working_hours: float = 0.0
    overtime_hours: float = 0.0

    @property
    def on_break(self) -> bool:
        return self.break_start_time is not None and self.break_end_time is None


@dataclass(frozen=True)
class TodayHours:
    total_minutes: int
    hours: int
    minutes: int
    has_active_session: bool
    session_count: int

    @property
    def formatted(self) -> str:
        return f"{self.hours}h {self.minutes}m"
