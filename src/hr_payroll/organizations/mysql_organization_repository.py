from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Organization
from .repository import OrganizationRepository


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT organization_id, company_name FROM organizations WHERE organization_id=%s",
                (int(organization_id),),
            )
            r = fetchone(cur)
            return Organization(int(r["organization_id"]), r["company_name"]) if r else None

    def get_by_name(self, company_name: str) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT organization_id, company_name FROM organizations WHERE company_name=%s",
                (company_name,),
            )
            r = fetchone(cur)
            return Organization(int(r["organization_id"]), r["company_name"]) if r else None

    def create(self, company_name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO organizations(company_name) VALUES(%s)", (company_name,))
            return int(cur.lastrowid)

    def rename(self, organization_id: int, company_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE organizations SET company_name=%s WHERE organization_id=%s",
                (company_name, int(organization_id)),
            )
            return cur.rowcount > 0
