from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import atomic, db_cursor, fetchall, fetchone
from .model import WorkSession
from .repository import SessionRepository

_COLUMNS = """
    session_id, employee_id, work_date, start_time, end_time, is_active,
    break_start_time, break_end_time, total_break_minutes, working_hours, overtime_hours
"""


def _to_session(r: dict) -> WorkSession:
    return WorkSession(
        session_id=int(r["session_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        is_active=bool(r["is_active"]),
        break_start_time=r.get("break_start_time"),
        break_end_time=r.get("break_end_time"),
        total_break_minutes=int(r.get("total_break_minutes") or 0),
        working_hours=float(r.get("working_hours") or 0),
        overtime_hours=float(r.get("overtime_hours") or 0),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def atomic(self):
        return atomic(self._conn_factory)

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def find_active(self, employee_id: int) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM work_sessions
                WHERE employee_id=%s AND is_active=1
                ORDER BY start_time DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_for_range(self, employee_id: int, start: date, end: date) -> Sequence[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM work_sessions
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY start_time ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_all_for_range(self, start: date, end: date) -> Sequence[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM work_sessions
                WHERE work_date BETWEEN %s AND %s
                ORDER BY employee_id ASC, start_time ASC
                """,
                (start, end),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def create(self, *, employee_id: int, work_date: date, start_time: datetime) -> WorkSession:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO work_sessions(employee_id, work_date, start_time, is_active)
                    VALUES(%s,%s,%s,1)
                    """,
                    (int(employee_id), work_date, start_time),
                )
                session_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            # uq_one_active_session: a concurrent start won the race
            raise ConflictError("You already have an active session") from exc

        return WorkSession(
            session_id=session_id,
            employee_id=int(employee_id),
            work_date=work_date,
            start_time=start_time,
        )

    def start_break(self, *, session_id: int, break_start_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_sessions
                SET break_start_time=%s, break_end_time=NULL
                WHERE session_id=%s AND is_active=1
                """,
                (break_start_time, int(session_id)),
            )
            return cur.rowcount > 0

    def end_break(self, *, session_id: int, break_end_time: datetime, total_break_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_sessions
                SET break_end_time=%s, total_break_minutes=%s
                WHERE session_id=%s AND is_active=1 AND break_end_time IS NULL
                """,
                (break_end_time, int(total_break_minutes), int(session_id)),
            )
            return cur.rowcount > 0

    def close(
        self,
        *,
        session_id: int,
        end_time: datetime,
        total_break_minutes: int,
        break_end_time: Optional[datetime],
        working_hours: float,
        overtime_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_sessions
                SET end_time=%s, is_active=0, total_break_minutes=%s,
                    break_end_time=COALESCE(%s, break_end_time),
                    working_hours=%s, overtime_hours=%s
                WHERE session_id=%s AND is_active=1
                """,
                (end_time, int(total_break_minutes), break_end_time, working_hours, overtime_hours, int(session_id)),
            )
            return cur.rowcount > 0
