from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import DayStatus
from ..sessions.model import WorkSession


@dataclass(frozen=True)
class DailyAttendance:
    """Attendance of one employee on one date, derived from that date's work sessions."""

    work_date: date
    status: DayStatus
    working_hours: float
    overtime_hours: float
    sessions: Sequence[WorkSession] = ()
    first_check_in: Optional[datetime] = None
    last_check_out: Optional[datetime] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class MonthlySummary:
    employee_id: int
    month: int
    year: int
    working_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    half_days: int = 0
    late_days: int = 0
    total_working_hours: float = 0.0
    total_overtime_hours: float = 0.0


@dataclass(frozen=True)
class EmployeeMonthlySummary:
    employee_id: int
    employee_code: str
    name: str
    department: Optional[str]
    summary: MonthlySummary


@dataclass(frozen=True)
class TodayAttendance:
    employee_id: int
    employee_code: str
    name: str
    department: Optional[str]
    status: DayStatus
    working_hours: float
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    has_active_session: bool = False


@dataclass(frozen=True)
class PayrollAttendance:
    """Day counts that feed the loss-of-pay computation."""

    total_working_days: int
    present_days: Decimal
    paid_leave_days: Decimal
    unpaid_leave_days: Decimal
    absent_days: Decimal
    working_hours: float = 0.0
    overtime_hours: float = 0.0
