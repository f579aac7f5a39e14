from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, List, Optional

from .connection import DatabaseConnection

# Connection of the innermost open `atomic()` block, if any.
_active_conn: ContextVar[Optional[Any]] = ContextVar("hr_payroll_active_conn", default=None)


@contextmanager
def atomic(conn_factory: DatabaseConnection) -> Iterator[None]:
    """Run every `db_cursor()` inside the block on one connection and one transaction.

    Nested blocks join the outer transaction.
    """

    if _active_conn.get() is not None:
        yield
        return

    conn = conn_factory.connect()
    token = _active_conn.set(conn)
    try:
        yield
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        _active_conn.reset(token)
        conn.close()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    outer = _active_conn.get()
    if outer is not None:
        cur = outer.cursor(dictionary=dictionary)
        try:
            yield outer, cur
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
