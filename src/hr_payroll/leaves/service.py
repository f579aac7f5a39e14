from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import Clock, inclusive_days, now_local
from ..common.validators import require_date, require_decimal, require_non_empty
from ..core.constants import DEFAULT_LEAVE_ALLOCATIONS, DEFAULT_PAGE_SIZE
from ..core.enums import PAID_LEAVE_TYPES, LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, StateError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Leave, LeaveBalance, LeaveFilters, LeavePage
from .repository import LeaveBalanceRepository, LeaveRepository

logger = logging.getLogger(__name__)

_FILE_ON_BEHALF_ROLES = frozenset({Role.ADMIN, Role.HR_OFFICER})


def parse_leave_type(value) -> LeaveType:
    try:
        return LeaveType(str(value).strip().upper())
    except ValueError:
        raise ValidationError("Invalid leave type")


def parse_leave_status(value) -> LeaveStatus:
    try:
        return LeaveStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError("Invalid leave status")


class LeaveBalanceService:
    """Per-year allocations. Every write keeps remaining == allocated - used."""

    def __init__(self, balances: LeaveBalanceRepository, *, default_allocations: Optional[Mapping[str, int]] = None):
        self._balances = balances
        self._defaults = dict(default_allocations or DEFAULT_LEAVE_ALLOCATIONS)

    def get_balances(self, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        return self._balances.list_for_employee(int(employee_id), int(year))

    def get_balance(self, employee_id: int, leave_type: LeaveType, year: int) -> Optional[LeaveBalance]:
        return self._balances.get(int(employee_id), leave_type, int(year))

    def allocate(self, *, employee_id: int, leave_type: LeaveType, year: int, allocated) -> LeaveBalance:
        amount = require_decimal(allocated, "allocated")
        existing = self._balances.get(int(employee_id), leave_type, int(year))
        if existing:
            self._balances.update(
                existing.balance_id,
                allocated=amount,
                used=existing.used,
                remaining=amount - existing.used,
            )
        else:
            self._balances.insert(employee_id=int(employee_id), leave_type=leave_type, year=int(year), allocated=amount)

        balance = self._balances.get(int(employee_id), leave_type, int(year))
        if not balance:
            raise NotFoundError("Leave balance not found")
        return balance

    def deduct(self, *, employee_id: int, leave_type: LeaveType, year: int, days: Decimal) -> Optional[LeaveBalance]:
        """Add `days` to used. Returns None when the employee has no balance row for that year."""

        balance = self._balances.get(int(employee_id), leave_type, int(year))
        if not balance:
            return None

        used = balance.used + days
        self._balances.update(balance.balance_id, allocated=balance.allocated, used=used, remaining=balance.allocated - used)
        return self._balances.get(int(employee_id), leave_type, int(year))

    def restore(self, *, employee_id: int, leave_type: LeaveType, year: int, days: Decimal) -> Optional[LeaveBalance]:
        balance = self._balances.get(int(employee_id), leave_type, int(year))
        if not balance:
            return None

        used = max(Decimal("0"), balance.used - days)
        self._balances.update(balance.balance_id, allocated=balance.allocated, used=used, remaining=balance.allocated - used)
        return self._balances.get(int(employee_id), leave_type, int(year))

    def initialize_defaults(self, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        for type_name, days in self._defaults.items():
            leave_type = LeaveType(type_name)
            if self._balances.get(int(employee_id), leave_type, int(year)):
                continue
            self._balances.insert(employee_id=int(employee_id), leave_type=leave_type, year=int(year), allocated=Decimal(days))
        return self.get_balances(employee_id, year)

    def validate(self, *, employee_id: int, leave_type: LeaveType, year: int, days: Decimal) -> None:
        balance = self._balances.get(int(employee_id), leave_type, int(year))
        if not balance:
            raise ValidationError(f"No leave balance found for {leave_type.value} in {year}")
        if balance.remaining < days:
            raise ValidationError(
                f"Insufficient leave balance. Available: {balance.remaining}, Requested: {days}"
            )


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        balances: LeaveBalanceService,
        employees: EmployeeRepository,
        *,
        clock: Clock = now_local,
    ):
        self._leaves = leaves
        self._balances = balances
        self._employees = employees
        self._clock = clock

    def _require_leave(self, leave_id: int) -> Leave:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def request_leave(
        self,
        *,
        requester_employee_id: int,
        requester_role: Role,
        leave_type,
        start_date,
        end_date,
        reason: Optional[str],
        employee_id: Optional[int] = None,
        attachment: Optional[str] = None,
    ) -> Leave:
        if not leave_type or not start_date or not end_date or not reason:
            raise ValidationError("Missing required fields")

        kind = parse_leave_type(leave_type)
        start = require_date(start_date, "startDate")
        end = require_date(end_date, "endDate")
        text = require_non_empty(reason, "reason")
        if end < start:
            raise ValidationError("End date must be after start date")

        target_id = int(requester_employee_id)
        if employee_id and requester_role in _FILE_ON_BEHALF_ROLES:
            target_id = int(employee_id)
        if not self._employees.get_by_id(target_id):
            raise NotFoundError("Employee not found")

        total_days = Decimal(inclusive_days(start, end))
        if kind in PAID_LEAVE_TYPES:
            self._balances.validate(employee_id=target_id, leave_type=kind, year=start.year, days=total_days)

        leave_id = self._leaves.create(
            employee_id=target_id,
            leave_type=kind,
            start_date=start,
            end_date=end,
            total_days=total_days,
            reason=text,
            attachment=attachment,
        )
        logger.info("Leave %s requested for employee %s (%s, %s days)", leave_id, target_id, kind.value, total_days)
        return self._require_leave(leave_id)

    def approve_leave(self, leave_id: int, *, approver: str) -> Leave:
        with self._leaves.atomic():
            leave = self._require_leave(leave_id)
            if leave.status != LeaveStatus.PENDING:
                raise StateError("Leave request is not pending")

            moved = self._leaves.set_status(
                leave.leave_id,
                status=LeaveStatus.APPROVED,
                expected=LeaveStatus.PENDING,
                approved_by=approver,
                approved_at=self._clock(),
            )
            if not moved:
                raise StateError("Leave request is not pending")

            if leave.leave_type in PAID_LEAVE_TYPES:
                self._balances.deduct(
                    employee_id=leave.employee_id,
                    leave_type=leave.leave_type,
                    year=leave.start_date.year,
                    days=leave.total_days,
                )

        logger.info("Leave %s approved by %s", leave.leave_id, approver)
        return self._require_leave(leave.leave_id)

    def reject_leave(self, leave_id: int, *, approver: str, reason: Optional[str]) -> Leave:
        text = require_non_empty(reason, "rejectionReason")
        leave = self._require_leave(leave_id)
        if leave.status != LeaveStatus.PENDING:
            raise StateError("Leave request is not pending")

        moved = self._leaves.set_status(
            leave.leave_id,
            status=LeaveStatus.REJECTED,
            expected=LeaveStatus.PENDING,
            approved_by=approver,
            approved_at=self._clock(),
            rejection_reason=text,
        )
        if not moved:
            raise StateError("Leave request is not pending")

        logger.info("Leave %s rejected by %s", leave.leave_id, approver)
        return self._require_leave(leave.leave_id)

    def cancel_leave(self, leave_id: int, *, employee_id: int) -> Leave:
        with self._leaves.atomic():
            leave = self._require_leave(leave_id)
            if leave.employee_id != int(employee_id):
                raise AuthorizationError("You can only cancel your own leave requests")
            if leave.status not in (LeaveStatus.PENDING, LeaveStatus.APPROVED):
                raise StateError("Only pending or approved leave requests can be cancelled")

            if not self._leaves.set_status(leave.leave_id, status=LeaveStatus.CANCELLED, expected=leave.status):
                raise StateError("Leave request changed, please retry")

            if leave.status == LeaveStatus.APPROVED and leave.leave_type in PAID_LEAVE_TYPES:
                self._balances.restore(
                    employee_id=leave.employee_id,
                    leave_type=leave.leave_type,
                    year=leave.start_date.year,
                    days=leave.total_days,
                )

        logger.info("Leave %s cancelled by employee %s", leave.leave_id, employee_id)
        return self._require_leave(leave.leave_id)

    def list_my_leaves(self, employee_id: int, filters: Optional[LeaveFilters] = None) -> Sequence[Leave]:
        return self._leaves.list_for_employee(int(employee_id), filters or LeaveFilters())

    def list_leaves(self, filters: Optional[LeaveFilters] = None, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> LeavePage:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        items, total = self._leaves.list_all(filters or LeaveFilters(), offset=(page - 1) * limit, limit=limit)
        return LeavePage(items=items, total=total, page=page, limit=limit)

    def find_approved_in_range(self, employee_id: int, start: date, end: date) -> Sequence[Leave]:
        return self._leaves.list_approved_in_range(int(employee_id), start, end)
