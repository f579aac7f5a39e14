from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence

from ..core.enums import PermissionAction, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .defaults import MODULES
from .model import RolePermission
from .repository import PermissionRepository

logger = logging.getLogger(__name__)


def parse_action(value) -> PermissionAction:
    text = str(value).strip()
    for action in PermissionAction:
        if text.lower() in (action.value.lower(), action.name.lower()):
            return action
    raise ValidationError(f"Invalid permission action: {value}")


class PermissionService:
    """Role/module/action grants. ADMIN is always allowed."""

    def __init__(self, permissions: PermissionRepository):
        self._permissions = permissions

    def has_permission(self, role: Role, module: str, action: PermissionAction) -> bool:
        if role == Role.ADMIN:
            return True
        return self._permissions.exists(role, module, action)

    def permissions_for_role(self, role: Role) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for p in self._permissions.list_for_role(role):
            grouped.setdefault(p.module, []).append(p.action.value)
        return grouped

    def replace_role_permissions(
        self,
        *,
        current_role: Role,
        role: Role,
        permissions: Mapping[str, Sequence[str]],
    ) -> Dict[str, List[str]]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change role permissions")
        if role == Role.ADMIN:
            raise ValidationError("Admin permissions cannot be changed")
        if not isinstance(permissions, Mapping):
            raise ValidationError("permissions must be an object of module -> actions")

        records: List[RolePermission] = []
        for module, actions in permissions.items():
            if module not in MODULES:
                raise ValidationError(f"Unknown module: {module}")
            if isinstance(actions, str) or not isinstance(actions, (list, tuple)):
                raise ValidationError(f"Actions for {module} must be a list")
            for action in dict.fromkeys(parse_action(a) for a in actions):
                records.append(RolePermission(role=role, module=module, action=action))

        count = self._permissions.replace_for_role(role, records)
        logger.info("Replaced permissions of role %s (%s grants)", role.value, count)
        return self.permissions_for_role(role)
