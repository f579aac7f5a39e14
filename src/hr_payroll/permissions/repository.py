from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from ..core.enums import PermissionAction, Role
from .model import RolePermission


class PermissionRepository(Protocol):
    def exists(self, role: Role, module: str, action: PermissionAction) -> bool:
        raise NotImplementedError

    def list_for_role(self, role: Role) -> Sequence[RolePermission]:
        raise NotImplementedError

    def replace_for_role(self, role: Role, permissions: Iterable[RolePermission]) -> int:
        """Drop every permission of `role` and insert the given ones in one transaction."""

        raise NotImplementedError
