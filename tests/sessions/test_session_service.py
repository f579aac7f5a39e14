from __future__ import annotations

from datetime import date, datetime

import pytest

from fakes import FakeEmployeesRepo, FakeSessionsRepo, MutableClock

from hr_payroll.core.enums import EmploymentStatus
from hr_payroll.core.exceptions import AuthorizationError, ConflictError, NotFoundError, StateError, ValidationError
from hr_payroll.sessions.service import SessionService


def _service(now=datetime(2025, 3, 3, 9, 0)):
    clock = MutableClock(now)
    employees = FakeEmployeesRepo()
    employee = employees.add()
    sessions = FakeSessionsRepo()
    return SessionService(sessions, employees, clock=clock), sessions, employees, employee, clock


def test_start_and_stop_session_freezes_hours():
    service, sessions, _, emp, clock = _service()

    started = service.start_session(emp.employee_id)
    assert started.is_active
    assert started.work_date == clock.now.date()

    clock.now = datetime(2025, 3, 3, 19, 30)
    stopped = service.stop_session(emp.employee_id)

    assert not stopped.is_active
    assert stopped.working_hours == 10.5
    assert stopped.overtime_hours == 1.5
    assert sessions.get_by_id(started.session_id).working_hours == 10.5


def test_second_start_conflicts():
    service, _, _, emp, _ = _service()
    service.start_session(emp.employee_id)

    with pytest.raises(ConflictError):
        service.start_session(emp.employee_id)


def test_inactive_or_unknown_employee_cannot_start():
    service, _, employees, _, _ = _service()
    inactive = employees.add(employment_status=EmploymentStatus.INACTIVE)

    with pytest.raises(AuthorizationError):
        service.start_session(inactive.employee_id)
    with pytest.raises(NotFoundError):
        service.start_session(999)


def test_break_without_active_session_fails():
    service, _, _, emp, _ = _service()

    with pytest.raises(StateError, match="No active session found"):
        service.start_break(emp.employee_id)
    with pytest.raises(StateError):
        service.end_break(emp.employee_id)


def test_ending_break_twice_fails():
    service, _, _, emp, clock = _service()
    service.start_session(emp.employee_id)

    with pytest.raises(StateError, match="No break to end"):
        service.end_break(emp.employee_id)

    clock.now = datetime(2025, 3, 3, 12, 0)
    service.start_break(emp.employee_id)
    with pytest.raises(StateError, match="Break already in progress"):
        service.start_break(emp.employee_id)

    clock.now = datetime(2025, 3, 3, 12, 45, 50)
    result = service.end_break(emp.employee_id)
    assert result.break_minutes == 45
    assert result.session.total_break_minutes == 45

    with pytest.raises(StateError, match="Break already ended"):
        service.end_break(emp.employee_id)


def test_stop_closes_running_break():
    service, _, _, emp, clock = _service()
    service.start_session(emp.employee_id)

    clock.now = datetime(2025, 3, 3, 13, 0)
    service.start_break(emp.employee_id)

    clock.now = datetime(2025, 3, 3, 14, 0)
    stopped = service.stop_session(emp.employee_id)

    assert stopped.total_break_minutes == 60
    assert stopped.break_end_time == clock.now
    assert stopped.working_hours == 4.0


def test_stop_without_session_fails():
    service, _, _, emp, _ = _service()
    with pytest.raises(StateError):
        service.stop_session(emp.employee_id)


def test_today_hours_counts_closed_and_active_sessions():
    service, sessions, _, emp, clock = _service(datetime(2025, 3, 3, 15, 30))
    sessions.add(employee_id=emp.employee_id, start=datetime(2025, 3, 3, 9, 0), end=datetime(2025, 3, 3, 12, 0))
    sessions.add(employee_id=emp.employee_id, start=datetime(2025, 3, 3, 13, 0))

    today = service.today_hours(emp.employee_id)

    assert today.total_minutes == 330
    assert today.formatted == "5h 30m"
    assert today.has_active_session
    assert today.session_count == 2

    active = service.get_active_session(emp.employee_id)
    assert active.live_working_hours == 2.5


def test_today_hours_sums_unrounded_minutes():
    service, sessions, _, emp, _ = _service(datetime(2025, 3, 3, 18, 0))
    for hour in (9, 10, 11):
        sessions.add(employee_id=emp.employee_id, start=datetime(2025, 3, 3, hour, 0), end=datetime(2025, 3, 3, hour, 2))
    sessions.add(
        employee_id=emp.employee_id,
        start=datetime(2025, 3, 3, 12, 0),
        end=datetime(2025, 3, 3, 13, 0),
        break_minutes=15,
    )

    today = service.today_hours(emp.employee_id)

    # each 2-minute session freezes at 0.03 h; the total still counts 6 minutes
    assert today.total_minutes == 51
    assert today.formatted == "0h 51m"


def test_list_sessions_by_date_range():
    service, sessions, _, emp, _ = _service()
    sessions.add(employee_id=emp.employee_id, start=datetime(2025, 3, 1, 9, 0), end=datetime(2025, 3, 1, 17, 0))
    sessions.add(employee_id=emp.employee_id, start=datetime(2025, 2, 28, 9, 0), end=datetime(2025, 2, 28, 17, 0))

    found = service.list_sessions(emp.employee_id, date(2025, 3, 1), date(2025, 3, 31))

    assert [s.work_date for s in found] == [date(2025, 3, 1)]
    with pytest.raises(ValidationError):
        service.list_sessions(emp.employee_id, date(2025, 3, 31), date(2025, 3, 1))
