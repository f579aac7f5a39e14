from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import Leave, LeaveBalance, LeaveFilters


class LeaveRepository(Protocol):
    def atomic(self) -> ContextManager[None]:
        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[Leave]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: Decimal,
        reason: str,
        attachment: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, filters: LeaveFilters) -> Sequence[Leave]:
        raise NotImplementedError

    def list_all(self, filters: LeaveFilters, *, offset: int, limit: int) -> tuple[Sequence[Leave], int]:
        raise NotImplementedError

    def list_approved_in_range(self, employee_id: int, start: date, end: date) -> Sequence[Leave]:
        """Approved leaves overlapping [start, end]."""

        raise NotImplementedError

    def set_status(
        self,
        leave_id: int,
        *,
        status: LeaveStatus,
        expected: LeaveStatus,
        approved_by: Optional[str] = None,
        approved_at: Optional[datetime] = None,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a leave from `expected` to `status`; False if it was not in `expected`."""

        raise NotImplementedError


class LeaveBalanceRepository(Protocol):
    def get(self, employee_id: int, leave_type: LeaveType, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def insert(self, *, employee_id: int, leave_type: LeaveType, year: int, allocated: Decimal) -> int:
        raise NotImplementedError

    def update(self, balance_id: int, *, allocated: Decimal, used: Decimal, remaining: Decimal) -> bool:
        raise NotImplementedError
