"""Schema creation and demo seed for a fresh MySQL database."""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_LEAVE_ALLOCATIONS
from ..core.enums import EmploymentStatus, Role
from ..permissions.defaults import DEFAULT_ROLE_PERMISSIONS
from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_DATABASE_LINES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")
_COMMENT = re.compile(r"--[^\n]*")


def _connect(db_config: dict, *, with_database: bool = True):
    kwargs = DBConfig.from_dict(db_config).connect_kwargs(with_database=with_database)
    return mysql.connector.connect(use_pure=True, **kwargs)


def schema_statements(sql: str) -> Iterator[str]:
    """Statements of schema.sql, minus comments and its own CREATE DATABASE / USE lines.

    The schema holds no string literals with ';', so a plain split is enough.
    """
    sql = _COMMENT.sub("", _DATABASE_LINES.sub("", sql))
    for stmt in sql.split(";"):
        stmt = stmt.strip()
        if stmt:
            yield stmt


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    statements = list(schema_statements(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s schema statements", len(statements))


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [str(r[0]) for r in cur.fetchall()]
    finally:
        conn.close()


def seed_role_permissions(db_config: dict) -> None:
    rows = [
        (role.value, module, action.value)
        for role, modules in DEFAULT_ROLE_PERMISSIONS.items()
        for module, actions in modules.items()
        for action in actions
    ]
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.executemany("INSERT IGNORE INTO role_permissions(role, module, action) VALUES(%s,%s,%s)", rows)
        conn.commit()
    finally:
        conn.close()
    logger.info("Seeded %s role permissions", len(rows))


def ensure_demo_admin(db_config: dict, *, company_name: str, email: str = "admin@example.com", password: str = "admin123") -> None:
    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)

        cur.execute("INSERT IGNORE INTO organizations(company_name) VALUES(%s)", (company_name,))
        cur.execute("SELECT organization_id FROM organizations WHERE company_name=%s", (company_name,))
        org_id = int(cur.fetchone()["organization_id"])

        cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
        existing = cur.fetchone()
        if existing:
            conn.commit()
            return

        cur.execute(
            "INSERT INTO users(email, full_name, password_hash) VALUES(%s,%s,%s)",
            (email, "System Admin", generate_password_hash(password)),
        )
        user_id = int(cur.lastrowid)
        cur.execute(
            """
            INSERT INTO employees(user_id, organization_id, employee_code, first_name, last_name, email,
                                  role, employment_status, date_of_joining, monthly_wage)
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                user_id,
                org_id,
                "ADMIN0001",
                "System",
                "Admin",
                email,
                Role.ADMIN.value,
                EmploymentStatus.ACTIVE.value,
                date.today(),
                0,
            ),
        )
        employee_id = int(cur.lastrowid)
        for leave_type, allocated in DEFAULT_LEAVE_ALLOCATIONS.items():
            cur.execute(
                """
                INSERT IGNORE INTO leave_balances(employee_id, leave_type, year, allocated, used, remaining)
                VALUES(%s,%s,%s,%s,0,%s)
                """,
                (employee_id, leave_type, date.today().year, allocated, allocated),
            )
        conn.commit()
        logger.info("Seeded demo admin %s", email)
    finally:
        conn.close()
