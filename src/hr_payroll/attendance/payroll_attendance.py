from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List

from ..common.datetime_utils import Clock, is_weekday, iter_dates, month_bounds, now_local
from ..core.constants import HALF_DAY_MIN_HOURS, STANDARD_WORKDAY_HOURS
from ..core.enums import PAID_LEAVE_TYPES, LeaveType
from ..leaves.service import LeaveService
from ..sessions.calculator import total_overtime_hours, total_working_hours
from ..sessions.model import WorkSession
from ..sessions.repository import SessionRepository
from .model import PayrollAttendance

_FULL = Decimal("1")
_HALF = Decimal("0.5")
_ZERO = Decimal("0")


def day_credit(working_hours: float) -> Decimal:
    """1 for a full day, 0.5 for a half day, otherwise nothing."""

    if working_hours >= STANDARD_WORKDAY_HOURS:
        return _FULL
    if working_hours >= HALF_DAY_MIN_HOURS:
        return _HALF
    return _ZERO


class PayrollAttendanceCalculator:
    """Counts the days a payslip is computed from, for one employee and month."""

    def __init__(self, sessions: SessionRepository, leaves: LeaveService, *, clock: Clock = now_local):
        self._sessions = sessions
        self._leaves = leaves
        self._clock = clock

    def total_working_days(self, month: int, year: int) -> int:
        start, end = month_bounds(month, year)
        today = self._clock().date()
        return sum(1 for d in iter_dates(start, min(end, today)) if is_weekday(d))

    def calculate(self, employee_id: int, month: int, year: int) -> PayrollAttendance:
        start, end = month_bounds(month, year)
        now = self._clock()

        by_date: Dict[date, List[WorkSession]] = defaultdict(list)
        sessions = self._sessions.list_for_range(int(employee_id), start, end)
        for s in sessions:
            by_date[s.work_date].append(s)

        present = sum((day_credit(total_working_hours(day, now)) for day in by_date.values()), _ZERO)

        paid = _ZERO
        unpaid = _ZERO
        for leave in self._leaves.find_approved_in_range(int(employee_id), start, end):
            if leave.leave_type in PAID_LEAVE_TYPES:
                paid += leave.total_days
            elif leave.leave_type == LeaveType.UNPAID_LEAVE:
                unpaid += leave.total_days

        total_days = self.total_working_days(month, year)
        absent = max(_ZERO, Decimal(total_days) - present - paid - unpaid)

        return PayrollAttendance(
            total_working_days=total_days,
            present_days=present,
            paid_leave_days=paid,
            unpaid_leave_days=unpaid,
            absent_days=absent,
            working_hours=total_working_hours(sessions, now),
            overtime_hours=total_overtime_hours(sessions, now),
        )
