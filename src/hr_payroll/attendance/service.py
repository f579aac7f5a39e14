from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import Clock, is_weekday, iter_dates, month_bounds, now_local
from ..common.validators import require_month_year
from ..core.enums import DayStatus, EmploymentStatus
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..sessions.calculator import total_overtime_hours, total_working_hours
from ..sessions.model import WorkSession
from ..sessions.repository import SessionRepository
from .factory import DayStatusStrategyFactory
from .model import DailyAttendance, EmployeeMonthlySummary, MonthlySummary, TodayAttendance


def _group_by_date(sessions: Sequence[WorkSession]) -> Dict[date, List[WorkSession]]:
    by_date: Dict[date, List[WorkSession]] = defaultdict(list)
    for s in sessions:
        by_date[s.work_date].append(s)
    return by_date


def summarize(employee_id: int, month: int, year: int, days: Sequence[DailyAttendance]) -> MonthlySummary:
    statuses = [d.status for d in days]
    return MonthlySummary(
        employee_id=employee_id,
        month=month,
        year=year,
        working_days=sum(1 for s in statuses if s in (DayStatus.PRESENT, DayStatus.LATE, DayStatus.HALF_DAY)),
        present_days=sum(1 for s in statuses if s in (DayStatus.PRESENT, DayStatus.LATE)),
        absent_days=statuses.count(DayStatus.ABSENT),
        half_days=statuses.count(DayStatus.HALF_DAY),
        late_days=statuses.count(DayStatus.LATE),
        total_working_hours=round(sum(d.working_hours for d in days), 2),
        total_overtime_hours=round(sum(d.overtime_hours for d in days), 2),
    )


class AttendanceService:
    """Day-by-day attendance derived from work sessions.

    Weekend days only show up when the employee actually worked on them.
    Days after today are never reported.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        employees: EmployeeRepository,
        *,
        strategy_factory: Optional[DayStatusStrategyFactory] = None,
        clock: Clock = now_local,
    ):
        self._sessions = sessions
        self._employees = employees
        self._factory = strategy_factory or DayStatusStrategyFactory()
        self._clock = clock

    def build_day(self, work_date: date, sessions: Sequence[WorkSession], now: datetime) -> DailyAttendance:
        ordered = sorted(sessions, key=lambda s: s.start_time)
        hours = total_working_hours(ordered, now)
        decision = self._factory.for_day(sessions=ordered, working_hours=hours).decide(sessions=ordered, working_hours=hours)

        check_outs = [s.end_time for s in ordered if s.end_time is not None]
        return DailyAttendance(
            work_date=work_date,
            status=decision.status,
            working_hours=hours,
            overtime_hours=total_overtime_hours(ordered, now),
            sessions=tuple(ordered),
            first_check_in=ordered[0].start_time if ordered else None,
            last_check_out=max(check_outs) if check_outs else None,
            note=decision.note,
        )

    def get_daily_attendance(self, employee_id: int, start: date, end: date) -> List[DailyAttendance]:
        now = self._clock()
        end = min(end, now.date())
        if end < start:
            return []

        by_date = _group_by_date(self._sessions.list_for_range(int(employee_id), start, end))
        days: List[DailyAttendance] = []
        for d in iter_dates(start, end):
            sessions = by_date.get(d, [])
            if not sessions and not is_weekday(d):
                continue
            days.append(self.build_day(d, sessions, now))
        return days

    def monthly_summary(self, employee_id: int, month, year) -> MonthlySummary:
        m, y = require_month_year(month, year)
        start, end = month_bounds(m, y)
        return summarize(int(employee_id), m, y, self.get_daily_attendance(employee_id, start, end))

    def my_attendance(self, employee_id: int, month, year) -> tuple[List[DailyAttendance], MonthlySummary]:
        m, y = require_month_year(month, year)
        start, end = month_bounds(m, y)
        days = self.get_daily_attendance(employee_id, start, end)
        return days, summarize(int(employee_id), m, y, days)

    def organization_summary(self, month, year, *, organization_id: Optional[int] = None) -> List[EmployeeMonthlySummary]:
        m, y = require_month_year(month, year)
        start, end = month_bounds(m, y)
        now = self._clock()
        last = min(end, now.date())

        by_employee: Dict[int, List[WorkSession]] = defaultdict(list)
        if last >= start:
            for s in self._sessions.list_all_for_range(start, last):
                by_employee[s.employee_id].append(s)

        rows: List[EmployeeMonthlySummary] = []
        for emp in self._employees.list_employees(status=EmploymentStatus.ACTIVE, organization_id=organization_id):
            by_date = _group_by_date(by_employee.get(emp.employee_id, []))
            days = [
                self.build_day(d, by_date.get(d, []), now)
                for d in (iter_dates(start, last) if last >= start else [])
                if by_date.get(d) or is_weekday(d)
            ]
            rows.append(
                EmployeeMonthlySummary(
                    employee_id=emp.employee_id,
                    employee_code=emp.employee_code,
                    name=emp.full_name,
                    department=emp.department,
                    summary=summarize(emp.employee_id, m, y, days),
                )
            )
        return rows

    def today_overview(self, *, organization_id: Optional[int] = None) -> List[TodayAttendance]:
        now = self._clock()
        today = now.date()
        by_employee: Dict[int, List[WorkSession]] = defaultdict(list)
        for s in self._sessions.list_all_for_range(today, today):
            by_employee[s.employee_id].append(s)

        return [
            self._today_row(emp, by_employee.get(emp.employee_id, []), now)
            for emp in self._employees.list_employees(status=EmploymentStatus.ACTIVE, organization_id=organization_id)
        ]

    def _today_row(self, employee: Employee, sessions: Sequence[WorkSession], now: datetime) -> TodayAttendance:
        day = self.build_day(now.date(), sessions, now)
        return TodayAttendance(
            employee_id=employee.employee_id,
            employee_code=employee.employee_code,
            name=employee.full_name,
            department=employee.department,
            status=day.status,
            working_hours=day.working_hours,
            check_in=day.first_check_in,
            check_out=day.last_check_out,
            has_active_session=any(s.is_active for s in sessions),
        )

    def employee_summary(self, employee_id: int, month, year) -> EmployeeMonthlySummary:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return EmployeeMonthlySummary(
            employee_id=employee.employee_id,
            employee_code=employee.employee_code,
            name=employee.full_name,
            department=employee.department,
            summary=self.monthly_summary(employee.employee_id, month, year),
        )
