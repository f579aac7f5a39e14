from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class Leave:
    """A date-range leave request. `total_days` counts both ends."""

    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: Decimal
    reason: str
    status: LeaveStatus
    created_at: datetime
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    attachment: Optional[str] = None


@dataclass(frozen=True)
class LeaveBalance:
    """Invariant: remaining == allocated - used."""

    balance_id: int
    employee_id: int
    leave_type: LeaveType
    year: int
    allocated: Decimal
    used: Decimal
    remaining: Decimal


@dataclass(frozen=True)
class LeaveFilters:
    status: Optional[LeaveStatus] = None
    leave_type: Optional[LeaveType] = None
    year: Optional[int] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class LeavePage:
    items: Sequence[Leave] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 50
