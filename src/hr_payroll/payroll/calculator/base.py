from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import PayrollAttendance
from ...employees.model import SalaryComponent, SalarySettings
from ..model import PayslipFigures, SalaryBreakdown


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def breakdown(self, salary: SalarySettings) -> SalaryBreakdown:
        raise NotImplementedError

    @abstractmethod
    def compute(
        self,
        salary: SalarySettings,
        components: Sequence[SalaryComponent],
        attendance: PayrollAttendance,
    ) -> PayslipFigures:
        raise NotImplementedError
