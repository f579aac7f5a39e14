from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import PayrunStatus, PayslipStatus
from .model import Payrun, Payslip, PayslipDraft


class PayrollRepository(Protocol):
    """Persistence for payruns and their payslips."""

    def atomic(self) -> ContextManager[None]:
        raise NotImplementedError

    def get_payrun(self, payrun_id: int) -> Optional[Payrun]:
        raise NotImplementedError

    def find_payrun(self, month: int, year: int) -> Optional[Payrun]:
        raise NotImplementedError

    def create_payrun(self, *, month: int, year: int, period_start: date, period_end: date) -> int:
        """Insert a PROCESSING payrun; raises ConflictError if the period already has one."""

        raise NotImplementedError

    def recent_payruns(self, limit: int) -> Sequence[Payrun]:
        raise NotImplementedError

    def set_payrun_total(self, payrun_id: int, total_amount: Decimal) -> None:
        raise NotImplementedError

    def complete_payrun(self, payrun_id: int, *, completed_at: datetime) -> None:
        raise NotImplementedError

    def get_payslip(self, payslip_id: int) -> Optional[Payslip]:
        raise NotImplementedError

    def find_payslip(self, employee_id: int, month: int, year: int) -> Optional[Payslip]:
        raise NotImplementedError

    def list_payslips(self, payrun_id: int) -> Sequence[Payslip]:
        raise NotImplementedError

    def list_payslips_by_employee(self, employee_id: int, year: Optional[int] = None) -> Sequence[Payslip]:
        raise NotImplementedError

    def insert_payslip(self, draft: PayslipDraft) -> int:
        raise NotImplementedError

    def replace_payslip(self, payslip_id: int, draft: PayslipDraft) -> None:
        """Overwrite a payslip's figures and reset it to PENDING."""

        raise NotImplementedError

    def set_payslip_status(
        self,
        payslip_id: int,
        *,
        status: PayslipStatus,
        expected: PayslipStatus,
        processed_by: Optional[str] = None,
        processed_at: Optional[datetime] = None,
    ) -> bool:
        raise NotImplementedError

    def process_pending_payslips(self, payrun_id: int, *, processed_by: Optional[str], processed_at: datetime) -> int:
        raise NotImplementedError

    def mark_payslips_paid(self, payrun_id: int, *, paid_at: datetime) -> int:
        raise NotImplementedError
