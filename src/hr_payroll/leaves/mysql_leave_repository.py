from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import atomic, db_cursor, fetchall, fetchone
from .model import Leave, LeaveBalance, LeaveFilters
from .repository import LeaveBalanceRepository, LeaveRepository

_LEAVE_COLUMNS = """
    l.leave_id, l.employee_id, l.leave_type, l.start_date, l.end_date, l.total_days, l.reason,
    l.status, l.approved_by, l.approved_at, l.rejection_reason, l.attachment, l.created_at
"""


def _to_leave(r: dict) -> Leave:
    return Leave(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=to_decimal(r["total_days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
        attachment=r.get("attachment"),
    )


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        balance_id=int(r["balance_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        year=int(r["year"]),
        allocated=to_decimal(r["allocated"]),
        used=to_decimal(r["used"]),
        remaining=to_decimal(r["remaining"]),
    )


def _filter_sql(filters: LeaveFilters) -> tuple[str, list]:
    sql = ""
    params: list = []
    if filters.status:
        sql += " AND l.status=%s"
        params.append(filters.status.value)
    if filters.leave_type:
        sql += " AND l.leave_type=%s"
        params.append(filters.leave_type.value)
    if filters.year:
        sql += " AND YEAR(l.start_date)=%s"
        params.append(int(filters.year))
    if filters.department:
        sql += " AND e.department=%s"
        params.append(filters.department)
    return sql, params


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def atomic(self):
        return atomic(self._conn_factory)

    def get_by_id(self, leave_id: int) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves l WHERE l.leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(employee_id, leave_type, start_date, end_date, total_days, reason, status, attachment)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    total_days,
                    reason,
                    LeaveStatus.PENDING.value,
                    attachment,
                ),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, employee_id: int, filters: LeaveFilters) -> Sequence[Leave]:
        where, params = _filter_sql(filters)
        sql = (
            f"SELECT {_LEAVE_COLUMNS} FROM leaves l JOIN employees e ON e.employee_id = l.employee_id "
            f"WHERE l.employee_id=%s{where} ORDER BY l.created_at DESC, l.leave_id DESC"
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(employee_id), *params))
            return [_to_leave(r) for r in fetchall(cur)]

    def list_all(self, filters: LeaveFilters, *, offset: int, limit: int) -> tuple[Sequence[Leave], int]:
        where, params = _filter_sql(filters)
        base = f"FROM leaves l JOIN employees e ON e.employee_id = l.employee_id WHERE 1=1{where}"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n {base}", tuple(params))
            r = fetchone(cur)
            total = int(r["n"]) if r else 0

            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} {base} ORDER BY l.created_at DESC, l.leave_id DESC LIMIT %s OFFSET %s",
                (*params, int(limit), int(offset)),
            )
            return [_to_leave(r) for r in fetchall(cur)], total

    def list_approved_in_range(self, employee_id: int, start: date, end: date) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leaves l
                WHERE l.employee_id=%s AND l.status=%s AND l.start_date <= %s AND l.end_date >= %s
                ORDER BY l.start_date ASC
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, end, start),
            )
            return [_to_leave(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s,
                    approved_by=COALESCE(%s, approved_by),
                    approved_at=COALESCE(%s, approved_at),
                    rejection_reason=COALESCE(%s, rejection_reason)
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, approved_by, approved_at, rejection_reason, int(leave_id), expected.value),
            )
            return cur.rowcount > 0


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, leave_type: LeaveType, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT balance_id, employee_id, leave_type, year, allocated, used, remaining
                FROM leave_balances
                WHERE employee_id=%s AND leave_type=%s AND year=%s
                FOR UPDATE
                """,
                (int(employee_id), leave_type.value, int(year)),
            )
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list_for_employee(self, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT balance_id, employee_id, leave_type, year, allocated, used, remaining
                FROM leave_balances
                WHERE employee_id=%s AND year=%s
                ORDER BY leave_type ASC
                """,
                (int(employee_id), int(year)),
            )
            return [_to_balance(r) for r in fetchall(cur)]

    def insert(self, *, employee_id: int, leave_type: LeaveType, year: int, allocated: Decimal) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_balances(employee_id, leave_type, year, allocated, used, remaining)
                VALUES (%s, %s, %s, %s, 0, %s)
                """,
                (int(employee_id), leave_type.value, int(year), allocated, allocated),
            )
            return int(cur.lastrowid)

    def update(self, balance_id: int, *, allocated: Decimal, used: Decimal, remaining: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_balances SET allocated=%s, used=%s, remaining=%s WHERE balance_id=%s",
                (allocated, used, remaining, int(balance_id)),
            )
            return cur.rowcount > 0
