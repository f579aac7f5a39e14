from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from fakes import MutableClock, make_container

from hr_payroll.attendance.payroll_attendance import day_credit
from hr_payroll.core.enums import LeaveStatus, LeaveType


def test_day_credit_thresholds():
    assert day_credit(9) == Decimal("1")
    assert day_credit(8.99) == Decimal("0.5")
    assert day_credit(4) == Decimal("0.5")
    assert day_credit(3.99) == Decimal("0")


def test_working_days_stop_at_today():
    container = make_container(MutableClock(datetime(2025, 3, 7, 18, 0)))
    calc = container.payroll_attendance

    assert calc.total_working_days(3, 2025) == 5
    assert calc.total_working_days(2, 2025) == 20
    assert calc.total_working_days(4, 2025) == 0


def test_payroll_attendance_with_leaves():
    container = make_container(MutableClock(datetime(2025, 3, 7, 18, 0)))
    emp = container.employees_repo.add()
    add = container.sessions_repo.add
    add(employee_id=emp.employee_id, start=datetime(2025, 3, 3, 9, 0), end=datetime(2025, 3, 3, 18, 0))
    add(employee_id=emp.employee_id, start=datetime(2025, 3, 4, 9, 0), end=datetime(2025, 3, 4, 14, 0))
    add(employee_id=emp.employee_id, start=datetime(2025, 3, 5, 9, 0), end=datetime(2025, 3, 5, 19, 0))
    container.leaves_repo.add(
        employee_id=emp.employee_id,
        leave_type=LeaveType.SICK_LEAVE,
        start_date=date(2025, 3, 6),
        end_date=date(2025, 3, 6),
        status=LeaveStatus.APPROVED,
    )
    # still pending, must not count
    container.leaves_repo.add(
        employee_id=emp.employee_id,
        leave_type=LeaveType.UNPAID_LEAVE,
        start_date=date(2025, 3, 7),
        end_date=date(2025, 3, 7),
    )

    result = container.payroll_attendance.calculate(emp.employee_id, 3, 2025)

    assert result.total_working_days == 5
    assert result.present_days == Decimal("2.5")
    assert result.paid_leave_days == Decimal("1")
    assert result.unpaid_leave_days == Decimal("0")
    assert result.absent_days == Decimal("1.5")
    assert result.working_hours == 24.0
    assert result.overtime_hours == 1.0


def test_absent_days_never_negative():
    container = make_container(MutableClock(datetime(2025, 3, 4, 18, 0)))
    emp = container.employees_repo.add()
    container.sessions_repo.add(
        employee_id=emp.employee_id, start=datetime(2025, 3, 1, 8, 0), end=datetime(2025, 3, 1, 18, 0)
    )
    container.sessions_repo.add(
        employee_id=emp.employee_id, start=datetime(2025, 3, 3, 8, 0), end=datetime(2025, 3, 3, 18, 0)
    )
    container.leaves_repo.add(
        employee_id=emp.employee_id,
        leave_type=LeaveType.UNPAID_LEAVE,
        start_date=date(2025, 3, 4),
        end_date=date(2025, 3, 5),
        status=LeaveStatus.APPROVED,
    )

    result = container.payroll_attendance.calculate(emp.employee_id, 3, 2025)

    assert result.total_working_days == 2
    assert result.unpaid_leave_days == Decimal("2")
    assert result.absent_days == Decimal("0")


def test_leave_spanning_two_months_counts_in_full_for_each():
    container = make_container(MutableClock(datetime(2025, 2, 28, 18, 0)))
    emp = container.employees_repo.add()
    container.leaves_repo.add(
        employee_id=emp.employee_id,
        leave_type=LeaveType.UNPAID_LEAVE,
        start_date=date(2025, 1, 30),
        end_date=date(2025, 2, 3),
        status=LeaveStatus.APPROVED,
    )

    january = container.payroll_attendance.calculate(emp.employee_id, 1, 2025)
    february = container.payroll_attendance.calculate(emp.employee_id, 2, 2025)

    # total_days is charged to every month the leave overlaps
    assert january.unpaid_leave_days == Decimal("5")
    assert february.unpaid_leave_days == Decimal("5")
    assert january.total_working_days == 23
    assert january.absent_days == Decimal("18")
    assert february.total_working_days == 20
    assert february.absent_days == Decimal("15")
