from __future__ import annotations

from typing import Iterable, Sequence

from ..core.enums import PermissionAction, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import atomic, db_cursor, fetchall, fetchone
from .model import RolePermission
from .repository import PermissionRepository


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, role: Role, module: str, action: PermissionAction) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS ok FROM role_permissions WHERE role=%s AND module=%s AND action=%s LIMIT 1",
                (role.value, module, action.value),
            )
            return fetchone(cur) is not None

    def list_for_role(self, role: Role) -> Sequence[RolePermission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT role, module, action FROM role_permissions WHERE role=%s ORDER BY module, action",
                (role.value,),
            )
            return [
                RolePermission(role=Role(r["role"]), module=r["module"], action=PermissionAction(r["action"]))
                for r in fetchall(cur)
            ]

    def replace_for_role(self, role: Role, permissions: Iterable[RolePermission]) -> int:
        rows = [(role.value, p.module, p.action.value) for p in permissions]
        with atomic(self._conn_factory):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM role_permissions WHERE role=%s", (role.value,))
                if rows:
                    cur.executemany("INSERT INTO role_permissions(role, module, action) VALUES(%s,%s,%s)", rows)
        return len(rows)
