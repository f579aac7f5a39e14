from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, floor_minutes, now_local
from ..core.enums import EmploymentStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, StateError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator import calculate_overtime, calculate_working_hours, session_working_hours, session_working_minutes
from .model import TodayHours, WorkSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveSession:
    session: WorkSession
    live_working_hours: float


@dataclass(frozen=True)
class BreakResult:
    session: WorkSession
    break_minutes: int


class SessionService:
    """Check-in/check-out and break tracking for work sessions."""

    def __init__(self, sessions: SessionRepository, employees: EmployeeRepository, *, clock: Clock = now_local):
        self._sessions = sessions
        self._employees = employees
        self._clock = clock

    def _require_active_session(self, employee_id: int) -> WorkSession:
        session = self._sessions.find_active(int(employee_id))
        if not session:
            raise StateError("No active session found")
        return session

    def start_session(self, employee_id: int) -> WorkSession:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        if employee.employment_status != EmploymentStatus.ACTIVE:
            raise AuthorizationError("Only active employees can start a work session")

        if self._sessions.find_active(employee.employee_id):
            raise ConflictError("You already have an active session")

        now = self._clock()
        session = self._sessions.create(employee_id=employee.employee_id, work_date=now.date(), start_time=now)
        logger.info("Work session %s started for employee %s", session.session_id, employee.employee_id)
        return session

    def stop_session(self, employee_id: int) -> WorkSession:
        session = self._require_active_session(employee_id)
        now = self._clock()

        break_minutes = session.total_break_minutes
        break_end = None
        if session.on_break:
            break_minutes += max(0, floor_minutes(session.break_start_time, now))
            break_end = now

        working_hours = calculate_working_hours(session.start_time, now, break_minutes)
        overtime_hours = calculate_overtime(working_hours)

        if not self._sessions.close(
            session_id=session.session_id,
            end_time=now,
            total_break_minutes=break_minutes,
            break_end_time=break_end,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
        ):
            raise StateError("No active session found to stop")

        logger.info(
            "Work session %s stopped for employee %s (%.2fh, overtime %.2fh)",
            session.session_id,
            session.employee_id,
            working_hours,
            overtime_hours,
        )
        return replace(
            session,
            end_time=now,
            is_active=False,
            break_end_time=break_end or session.break_end_time,
            total_break_minutes=break_minutes,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
        )

    def start_break(self, employee_id: int) -> WorkSession:
        session = self._require_active_session(employee_id)
        if session.on_break:
            raise StateError("Break already in progress")

        now = self._clock()
        if not self._sessions.start_break(session_id=session.session_id, break_start_time=now):
            raise StateError("No active session found")
        return replace(session, break_start_time=now, break_end_time=None)

    def end_break(self, employee_id: int) -> BreakResult:
        session = self._require_active_session(employee_id)
        if session.break_start_time is None:
            raise StateError("No break to end")
        if session.break_end_time is not None:
            raise StateError("Break already ended")

        now = self._clock()
        minutes = max(0, floor_minutes(session.break_start_time, now))
        total = session.total_break_minutes + minutes
        if not self._sessions.end_break(session_id=session.session_id, break_end_time=now, total_break_minutes=total):
            raise StateError("Break already ended")
        return BreakResult(session=replace(session, break_end_time=now, total_break_minutes=total), break_minutes=minutes)

    def get_active_session(self, employee_id: int) -> Optional[ActiveSession]:
        session = self._sessions.find_active(int(employee_id))
        if not session:
            return None
        return ActiveSession(session=session, live_working_hours=session_working_hours(session, self._clock()))

    def today_hours(self, employee_id: int) -> TodayHours:
        now = self._clock()
        sessions = self._sessions.list_for_range(int(employee_id), now.date(), now.date())

        total_minutes = sum(session_working_minutes(s, now) for s in sessions)
        return TodayHours(
            total_minutes=total_minutes,
            hours=total_minutes // 60,
            minutes=total_minutes % 60,
            has_active_session=any(s.is_active for s in sessions),
            session_count=len(sessions),
        )

    def list_sessions(self, employee_id: int, start: date, end: date) -> Sequence[WorkSession]:
        if end < start:
            raise ValidationError("End date must be on or after start date")
        return self._sessions.list_for_range(int(employee_id), start, end)
