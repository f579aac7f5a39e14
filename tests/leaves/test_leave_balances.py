from decimal import Decimal

import pytest

from fakes import FakeBalancesRepo

from hr_payroll.core.enums import LeaveType
from hr_payroll.core.exceptions import ValidationError
from hr_payroll.leaves.service import LeaveBalanceService


def test_initialize_defaults_is_idempotent():
    service = LeaveBalanceService(FakeBalancesRepo())

    first = service.initialize_defaults(7, 2025)
    again = service.initialize_defaults(7, 2025)

    allocated = {b.leave_type: b.allocated for b in again}
    assert len(first) == len(again) == 3
    assert allocated == {
        LeaveType.PAID_TIME_OFF: Decimal("24"),
        LeaveType.SICK_LEAVE: Decimal("7"),
        LeaveType.UNPAID_LEAVE: Decimal("0"),
    }


def test_allocate_keeps_used_days():
    service = LeaveBalanceService(FakeBalancesRepo())
    service.allocate(employee_id=1, leave_type=LeaveType.SICK_LEAVE, year=2025, allocated=10)
    service.deduct(employee_id=1, leave_type=LeaveType.SICK_LEAVE, year=2025, days=Decimal("4"))

    balance = service.allocate(employee_id=1, leave_type=LeaveType.SICK_LEAVE, year=2025, allocated="12")

    assert balance.allocated == Decimal("12")
    assert balance.used == Decimal("4")
    assert balance.remaining == Decimal("8")


def test_restore_never_goes_below_zero():
    service = LeaveBalanceService(FakeBalancesRepo())
    service.allocate(employee_id=1, leave_type=LeaveType.PAID_TIME_OFF, year=2025, allocated=5)
    service.deduct(employee_id=1, leave_type=LeaveType.PAID_TIME_OFF, year=2025, days=Decimal("1"))

    balance = service.restore(employee_id=1, leave_type=LeaveType.PAID_TIME_OFF, year=2025, days=Decimal("3"))

    assert balance.used == Decimal("0")
    assert balance.remaining == balance.allocated


def test_missing_balance_row():
    service = LeaveBalanceService(FakeBalancesRepo())
    assert service.deduct(employee_id=1, leave_type=LeaveType.SICK_LEAVE, year=2025, days=Decimal("1")) is None
    with pytest.raises(ValidationError):
        service.validate(employee_id=1, leave_type=LeaveType.SICK_LEAVE, year=2025, days=Decimal("1"))
    with pytest.raises(ValidationError):
        service.allocate(employee_id=1, leave_type=LeaveType.SICK_LEAVE, year=2025, allocated=-1)
