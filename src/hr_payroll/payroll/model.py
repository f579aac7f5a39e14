from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.model import PayrollAttendance
from ..core.enums import PayrunStatus, PayslipStatus


@dataclass(frozen=True)
class SalaryBreakdown:
    """The six predefined earning components of a monthly wage.

    They sum to `monthly_wage` unless the configured percentages overshoot it,
    in which case `exceeds_wage` is set and `overflow` holds the excess.
    """

    monthly_wage: Decimal
    basic_salary: Decimal
    hra: Decimal
    standard_allowance: Decimal
    performance_bonus: Decimal
    leave_travel_allowance: Decimal
    fixed_allowance: Decimal
    exceeds_wage: bool = False
    overflow: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return (
            self.basic_salary
            + self.hra
            + self.standard_allowance
            + self.performance_bonus
            + self.leave_travel_allowance
            + self.fixed_allowance
        )


@dataclass(frozen=True)
class PayslipFigures:
    breakdown: SalaryBreakdown
    other_earnings: Decimal
    gross_salary: Decimal
    pf_deduction: Decimal
    professional_tax: Decimal
    lop_deduction: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class PayslipDraft:
    """Everything needed to persist a freshly computed payslip."""

    payrun_id: int
    employee_id: int
    month: int
    year: int
    attendance: PayrollAttendance
    figures: PayslipFigures


@dataclass(frozen=True)
class Payslip:
    payslip_id: int
    payrun_id: int
    employee_id: int
    month: int
    year: int
    attendance: PayrollAttendance
    figures: PayslipFigures
    status: PayslipStatus
    created_at: Optional[datetime] = None
    processed_by: Optional[str] = None
    processed_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    employee_code: Optional[str] = None
    employee_name: Optional[str] = None
    department: Optional[str] = None

    @property
    def net_salary(self) -> Decimal:
        return self.figures.net_salary


@dataclass(frozen=True)
class Payrun:
    payrun_id: int
    month: int
    year: int
    period_start: date
    period_end: date
    status: PayrunStatus
    total_amount: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    payslips: Sequence[Payslip] = ()


@dataclass(frozen=True)
class GenerationResult:
    payrun: Payrun
    created: int
    replaced: int
    skipped: int


@dataclass(frozen=True)
class PayslipApproval:
    payslip: Payslip
    payrun: Payrun
    payrun_completed: bool


@dataclass(frozen=True)
class PayrollWarning:
    employee_id: int
    employee_code: str
    name: str
    message: str
    overflow: Decimal = Decimal("0")
