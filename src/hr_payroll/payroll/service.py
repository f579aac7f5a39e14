from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional, Sequence

from ..attendance.payroll_attendance import PayrollAttendanceCalculator
from ..common.datetime_utils import Clock, month_bounds, now_local
from ..common.money import total
from ..common.validators import require_month_year
from ..core.constants import DEFAULT_RECENT_PAYRUNS
from ..core.enums import EmploymentStatus, PayrunStatus, PayslipStatus
from ..core.exceptions import ConflictError, NotFoundError, StateError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import GenerationResult, Payrun, Payslip, PayslipApproval, PayslipDraft, PayrollWarning
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_SETTLED = (PayslipStatus.PROCESSED, PayslipStatus.PAID)


class PayrollService:
    """Monthly payruns: PROCESSING until every payslip is settled, then COMPLETED."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        attendance: PayrollAttendanceCalculator,
        *,
        calculator: Optional[SalaryCalculator] = None,
        clock: Clock = now_local,
    ):
        self._payroll = payroll
        self._employees = employees
        self._attendance = attendance
        self._calculator = calculator or StandardSalaryCalculator()
        self._clock = clock

    def _with_payslips(self, payrun: Payrun) -> Payrun:
        return replace(payrun, payslips=tuple(self._payroll.list_payslips(payrun.payrun_id)))

    def _require_payrun(self, payrun_id: int) -> Payrun:
        payrun = self._payroll.get_payrun(int(payrun_id))
        if not payrun:
            raise NotFoundError("Payrun not found")
        return payrun

    def _require_payslip(self, payslip_id: int) -> Payslip:
        payslip = self._payroll.get_payslip(int(payslip_id))
        if not payslip:
            raise NotFoundError("Payslip not found")
        return payslip

    def get_or_create_payrun(self, month, year) -> Payrun:
        m, y = require_month_year(month, year)
        existing = self._payroll.find_payrun(m, y)
        if existing:
            return self._with_payslips(existing)

        start, end = month_bounds(m, y)
        try:
            payrun_id = self._payroll.create_payrun(month=m, year=y, period_start=start, period_end=end)
            logger.info("Payrun %s created for %02d/%s", payrun_id, m, y)
        except ConflictError:
            # created concurrently by another request
            existing = self._payroll.find_payrun(m, y)
            if not existing:
                raise
            return self._with_payslips(existing)

        return self._with_payslips(self._require_payrun(payrun_id))

    def _draft_for(self, payrun: Payrun, employee: Employee) -> PayslipDraft:
        attendance = self._attendance.calculate(employee.employee_id, payrun.month, payrun.year)
        figures = self._calculator.compute(
            employee.salary,
            self._employees.list_components(employee.employee_id),
            attendance,
        )
        if figures.breakdown.exceeds_wage:
            logger.warning(
                "Salary components of employee %s exceed the monthly wage by %s",
                employee.employee_code,
                figures.breakdown.overflow,
            )
        return PayslipDraft(
            payrun_id=payrun.payrun_id,
            employee_id=employee.employee_id,
            month=payrun.month,
            year=payrun.year,
            attendance=attendance,
            figures=figures,
        )

    def generate_payslips(self, payrun_id: int, *, force: bool = False, organization_id: Optional[int] = None) -> GenerationResult:
        """Compute a PENDING payslip for every active employee still missing one.

        With `force`, existing payslips that are not PAID are recomputed as well.
        """

        payrun = self._require_payrun(payrun_id)
        if payrun.status == PayrunStatus.COMPLETED:
            raise StateError("Payrun is already completed")

        created = replaced = skipped = 0
        employees = self._employees.list_employees(status=EmploymentStatus.ACTIVE, organization_id=organization_id)
        with self._payroll.atomic():
            for employee in employees:
                existing = self._payroll.find_payslip(employee.employee_id, payrun.month, payrun.year)
                if existing and (not force or existing.status == PayslipStatus.PAID):
                    skipped += 1
                    continue

                draft = self._draft_for(payrun, employee)
                if existing:
                    self._payroll.replace_payslip(existing.payslip_id, draft)
                    replaced += 1
                else:
                    self._payroll.insert_payslip(draft)
                    created += 1

            amount = total(p.net_salary for p in self._payroll.list_payslips(payrun.payrun_id))
            self._payroll.set_payrun_total(payrun.payrun_id, amount)

        logger.info(
            "Payrun %s: %s payslips created, %s replaced, %s skipped, total %s",
            payrun.payrun_id,
            created,
            replaced,
            skipped,
            amount,
        )
        return GenerationResult(
            payrun=self._with_payslips(self._require_payrun(payrun.payrun_id)),
            created=created,
            replaced=replaced,
            skipped=skipped,
        )

    def approve_payslip(self, payslip_id: int, *, approver: str) -> PayslipApproval:
        with self._payroll.atomic():
            payslip = self._require_payslip(payslip_id)
            payrun = self._require_payrun(payslip.payrun_id)
            if payrun.status == PayrunStatus.COMPLETED:
                raise StateError("Payrun is already completed")
            if payslip.status != PayslipStatus.PENDING:
                raise StateError(f"Payslip is already {payslip.status.value.lower()}")

            now = self._clock()
            if not self._payroll.set_payslip_status(
                payslip.payslip_id,
                status=PayslipStatus.PROCESSED,
                expected=PayslipStatus.PENDING,
                processed_by=approver,
                processed_at=now,
            ):
                raise StateError("Payslip is no longer pending")

            completed = all(p.status in _SETTLED for p in self._payroll.list_payslips(payrun.payrun_id))
            if completed:
                self._payroll.mark_payslips_paid(payrun.payrun_id, paid_at=now)
                self._payroll.complete_payrun(payrun.payrun_id, completed_at=now)

        logger.info("Payslip %s approved by %s", payslip.payslip_id, approver)
        if completed:
            logger.info("Payrun %s completed: all payslips approved", payrun.payrun_id)

        return PayslipApproval(
            payslip=self._require_payslip(payslip.payslip_id),
            payrun=self._with_payslips(self._require_payrun(payrun.payrun_id)),
            payrun_completed=completed,
        )

    def mark_payrun_as_done(self, payrun_id: int, *, processed_by: Optional[str] = None) -> Payrun:
        with self._payroll.atomic():
            payrun = self._require_payrun(payrun_id)
            if payrun.status == PayrunStatus.COMPLETED:
                raise StateError("Payrun is already completed")

            now = self._clock()
            self._payroll.process_pending_payslips(payrun.payrun_id, processed_by=processed_by, processed_at=now)
            paid = self._payroll.mark_payslips_paid(payrun.payrun_id, paid_at=now)
            self._payroll.complete_payrun(payrun.payrun_id, completed_at=now)

        logger.info("Payrun %s marked as done, %s payslips paid", payrun.payrun_id, paid)
        return self._with_payslips(self._require_payrun(payrun.payrun_id))

    def get_payrun_with_payslips(self, month, year) -> Optional[Payrun]:
        m, y = require_month_year(month, year)
        payrun = self._payroll.find_payrun(m, y)
        return self._with_payslips(payrun) if payrun else None

    def get_payslip(self, payslip_id: int) -> Payslip:
        return self._require_payslip(payslip_id)

    def get_payslips_by_employee(self, employee_id: int, year: Optional[int] = None) -> Sequence[Payslip]:
        return self._payroll.list_payslips_by_employee(int(employee_id), year)

    def recent_payruns(self, limit: int = DEFAULT_RECENT_PAYRUNS) -> Sequence[Payrun]:
        return self._payroll.recent_payruns(max(1, int(limit)))

    def payroll_warnings(self, *, organization_id: Optional[int] = None) -> List[PayrollWarning]:
        warnings: List[PayrollWarning] = []
        for employee in self._employees.list_employees(status=EmploymentStatus.ACTIVE, organization_id=organization_id):
            if employee.salary.monthly_wage <= Decimal("0"):
                warnings.append(
                    PayrollWarning(
                        employee_id=employee.employee_id,
                        employee_code=employee.employee_code,
                        name=employee.full_name,
                        message="Monthly wage is not configured",
                    )
                )
                continue

            breakdown = self._calculator.breakdown(employee.salary)
            if breakdown.exceeds_wage:
                warnings.append(
                    PayrollWarning(
                        employee_id=employee.employee_id,
                        employee_code=employee.employee_code,
                        name=employee.full_name,
                        message="Salary components exceed the monthly wage",
                        overflow=breakdown.overflow,
                    )
                )
        return warnings
