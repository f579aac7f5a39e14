from __future__ import annotations

from typing import Optional, Protocol

from .model import Organization


class OrganizationRepository(Protocol):
    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        raise NotImplementedError

    def get_by_name(self, company_name: str) -> Optional[Organization]:
        raise NotImplementedError

    def create(self, company_name: str) -> int:
        raise NotImplementedError

    def rename(self, organization_id: int, company_name: str) -> bool:
        raise NotImplementedError
