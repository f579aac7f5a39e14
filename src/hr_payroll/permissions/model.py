from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PermissionAction, Role


@dataclass(frozen=True)
class RolePermission:
    role: Role
    module: str
    action: PermissionAction
