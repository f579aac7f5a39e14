from __future__ import annotations

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Organization
from .repository import OrganizationRepository


class OrganizationService:
    def __init__(self, organizations: OrganizationRepository):
        self._organizations = organizations

    def get(self, organization_id: int) -> Organization:
        org = self._organizations.get_by_id(int(organization_id))
        if not org:
            raise NotFoundError("Organization not found")
        return org

    def find_or_create(self, company_name: str) -> Organization:
        company_name = require_non_empty(company_name, "Company name")
        org = self._organizations.get_by_name(company_name)
        if org:
            return org
        return Organization(self._organizations.create(company_name), company_name)

    def rename(self, *, current_role: Role, organization_id: int, company_name: str) -> Organization:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can update the organization")
        company_name = require_non_empty(company_name, "Company name")

        existing = self._organizations.get_by_name(company_name)
        if existing and existing.organization_id != int(organization_id):
            raise ValidationError("Another organization already uses this name")
        if not self._organizations.rename(int(organization_id), company_name):
            raise NotFoundError("Organization not found")
        return Organization(int(organization_id), company_name)
