from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..attendance.model import PayrollAttendance
from ..common.money import to_decimal
from ..core.enums import PayrunStatus, PayslipStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import atomic, db_cursor, fetchall, fetchone
from .model import Payrun, Payslip, PayslipDraft, PayslipFigures, SalaryBreakdown
from .repository import PayrollRepository

_PAYRUN_COLUMNS = "payrun_id, month, year, period_start, period_end, status, total_amount, created_at, completed_at"

_PAYSLIP_COLUMNS = """
    p.payslip_id, p.payrun_id, p.employee_id, p.month, p.year,
    p.working_days, p.present_days, p.absent_days, p.paid_leave_days, p.unpaid_leave_days,
    p.working_hours, p.overtime_hours,
    p.monthly_wage, p.basic_salary, p.hra, p.standard_allowance, p.performance_bonus,
    p.leave_travel_allowance, p.fixed_allowance, p.other_earnings, p.gross_salary,
    p.pf_deduction, p.professional_tax, p.lop_deduction, p.other_deductions,
    p.total_deductions, p.net_salary, p.status, p.processed_by, p.processed_at, p.paid_at, p.created_at,
    e.employee_code, CONCAT(e.first_name, ' ', e.last_name) AS employee_name, e.department
"""

_PAYSLIP_FROM = "FROM payslips p JOIN employees e ON e.employee_id = p.employee_id"

# Column order shared by INSERT and UPDATE of a payslip's computed figures.
_FIGURE_COLUMNS = (
    "working_days",
    "present_days",
    "absent_days",
    "paid_leave_days",
    "unpaid_leave_days",
    "working_hours",
    "overtime_hours",
    "monthly_wage",
    "basic_salary",
    "hra",
    "standard_allowance",
    "performance_bonus",
    "leave_travel_allowance",
    "fixed_allowance",
    "other_earnings",
    "gross_salary",
    "pf_deduction",
    "professional_tax",
    "lop_deduction",
    "other_deductions",
    "total_deductions",
    "net_salary",
)


def _figure_values(draft: PayslipDraft) -> tuple:
    a = draft.attendance
    f = draft.figures
    b = f.breakdown
    return (
        a.total_working_days,
        a.present_days,
        a.absent_days,
        a.paid_leave_days,
        a.unpaid_leave_days,
        a.working_hours,
        a.overtime_hours,
        b.monthly_wage,
        b.basic_salary,
        b.hra,
        b.standard_allowance,
        b.performance_bonus,
        b.leave_travel_allowance,
        b.fixed_allowance,
        f.other_earnings,
        f.gross_salary,
        f.pf_deduction,
        f.professional_tax,
        f.lop_deduction,
        f.other_deductions,
        f.total_deductions,
        f.net_salary,
    )


def _to_payrun(r: dict) -> Payrun:
    return Payrun(
        payrun_id=int(r["payrun_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        period_start=r["period_start"],
        period_end=r["period_end"],
        status=PayrunStatus(r["status"]),
        total_amount=to_decimal(r["total_amount"]),
        created_at=r.get("created_at"),
        completed_at=r.get("completed_at"),
    )


def _to_payslip(r: dict) -> Payslip:
    def d(key: str) -> Decimal:
        return to_decimal(r[key])

    breakdown = SalaryBreakdown(
        monthly_wage=d("monthly_wage"),
        basic_salary=d("basic_salary"),
        hra=d("hra"),
        standard_allowance=d("standard_allowance"),
        performance_bonus=d("performance_bonus"),
        leave_travel_allowance=d("leave_travel_allowance"),
        fixed_allowance=d("fixed_allowance"),
    )
    return Payslip(
        payslip_id=int(r["payslip_id"]),
        payrun_id=int(r["payrun_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        attendance=PayrollAttendance(
            total_working_days=int(r["working_days"]),
            present_days=d("present_days"),
            paid_leave_days=d("paid_leave_days"),
            unpaid_leave_days=d("unpaid_leave_days"),
            absent_days=d("absent_days"),
            working_hours=float(r["working_hours"] or 0),
            overtime_hours=float(r["overtime_hours"] or 0),
        ),
        figures=PayslipFigures(
            breakdown=breakdown,
            other_earnings=d("other_earnings"),
            gross_salary=d("gross_salary"),
            pf_deduction=d("pf_deduction"),
            professional_tax=d("professional_tax"),
            lop_deduction=d("lop_deduction"),
            other_deductions=d("other_deductions"),
            total_deductions=d("total_deductions"),
            net_salary=d("net_salary"),
        ),
        status=PayslipStatus(r["status"]),
        created_at=r.get("created_at"),
        processed_by=r.get("processed_by"),
        processed_at=r.get("processed_at"),
        paid_at=r.get("paid_at"),
        employee_code=r.get("employee_code"),
        employee_name=r.get("employee_name"),
        department=r.get("department"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def atomic(self):
        return atomic(self._conn_factory)

    def get_payrun(self, payrun_id: int) -> Optional[Payrun]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYRUN_COLUMNS} FROM payruns WHERE payrun_id=%s", (int(payrun_id),))
            r = fetchone(cur)
            return _to_payrun(r) if r else None

    def find_payrun(self, month: int, year: int) -> Optional[Payrun]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYRUN_COLUMNS} FROM payruns WHERE month=%s AND year=%s", (int(month), int(year)))
            r = fetchone(cur)
            return _to_payrun(r) if r else None

    def create_payrun(self, *, month: int, year: int, period_start: date, period_end: date) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payruns(month, year, period_start, period_end, status, total_amount)
                    VALUES (%s, %s, %s, %s, %s, 0)
                    """,
                    (int(month), int(year), period_start, period_end, PayrunStatus.PROCESSING.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            raise ConflictError(f"A payrun for {month}/{year} already exists") from exc

    def recent_payruns(self, limit: int) -> Sequence[Payrun]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYRUN_COLUMNS} FROM payruns ORDER BY year DESC, month DESC LIMIT %s",
                (int(limit),),
            )
            return [_to_payrun(r) for r in fetchall(cur)]

    def set_payrun_total(self, payrun_id: int, total_amount: Decimal) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE payruns SET total_amount=%s WHERE payrun_id=%s", (total_amount, int(payrun_id)))

    def complete_payrun(self, payrun_id: int, *, completed_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payruns SET status=%s, completed_at=%s WHERE payrun_id=%s",
                (PayrunStatus.COMPLETED.value, completed_at, int(payrun_id)),
            )

    def get_payslip(self, payslip_id: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYSLIP_COLUMNS} {_PAYSLIP_FROM} WHERE p.payslip_id=%s", (int(payslip_id),))
            r = fetchone(cur)
            return _to_payslip(r) if r else None

    def find_payslip(self, employee_id: int, month: int, year: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYSLIP_COLUMNS} {_PAYSLIP_FROM} WHERE p.employee_id=%s AND p.month=%s AND p.year=%s",
                (int(employee_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _to_payslip(r) if r else None

    def list_payslips(self, payrun_id: int) -> Sequence[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYSLIP_COLUMNS} {_PAYSLIP_FROM} WHERE p.payrun_id=%s ORDER BY e.employee_code ASC",
                (int(payrun_id),),
            )
            return [_to_payslip(r) for r in fetchall(cur)]

    def list_payslips_by_employee(self, employee_id: int, year: Optional[int] = None) -> Sequence[Payslip]:
        sql = f"SELECT {_PAYSLIP_COLUMNS} {_PAYSLIP_FROM} WHERE p.employee_id=%s"
        params: list = [int(employee_id)]
        if year:
            sql += " AND p.year=%s"
            params.append(int(year))
        sql += " ORDER BY p.year DESC, p.month DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_payslip(r) for r in fetchall(cur)]

    def insert_payslip(self, draft: PayslipDraft) -> int:
        columns = ("payrun_id", "employee_id", "month", "year", *_FIGURE_COLUMNS, "status")
        values = (draft.payrun_id, draft.employee_id, draft.month, draft.year, *_figure_values(draft), PayslipStatus.PENDING.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO payslips({', '.join(columns)}) VALUES ({', '.join(['%s'] * len(columns))})",
                values,
            )
            return int(cur.lastrowid)

    def replace_payslip(self, payslip_id: int, draft: PayslipDraft) -> None:
        assignments = ", ".join(f"{c}=%s" for c in _FIGURE_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE payslips
                SET payrun_id=%s, {assignments}, status=%s, processed_by=NULL, processed_at=NULL, paid_at=NULL
                WHERE payslip_id=%s
                """,
                (draft.payrun_id, *_figure_values(draft), PayslipStatus.PENDING.value, int(payslip_id)),
            )

    def set_payslip_status(
        self,
        payslip_id: int,
        *,
        status: PayslipStatus,
        expected: PayslipStatus,
        processed_by: Optional[str] = None,
        processed_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payslips
                SET status=%s, processed_by=COALESCE(%s, processed_by), processed_at=COALESCE(%s, processed_at)
                WHERE payslip_id=%s AND status=%s
                """,
                (status.value, processed_by, processed_at, int(payslip_id), expected.value),
            )
            return cur.rowcount > 0

    def process_pending_payslips(self, payrun_id: int, *, processed_by: Optional[str], processed_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payslips
                SET status=%s, processed_by=%s, processed_at=%s
                WHERE payrun_id=%s AND status=%s
                """,
                (
                    PayslipStatus.PROCESSED.value,
                    processed_by,
                    processed_at,
                    int(payrun_id),
                    PayslipStatus.PENDING.value,
                ),
            )
            return int(cur.rowcount)

    def mark_payslips_paid(self, payrun_id: int, *, paid_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payslips SET status=%s, paid_at=%s WHERE payrun_id=%s AND status=%s",
                (PayslipStatus.PAID.value, paid_at, int(payrun_id), PayslipStatus.PROCESSED.value),
            )
            return int(cur.rowcount)
