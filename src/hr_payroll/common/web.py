"""Flask helpers shared by the controllers: auth guards, request parsing and JSON output."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, request, session

from ..core.enums import PermissionAction, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..users.service import SessionUser

logger = logging.getLogger(__name__)

CONTAINER_KEY = "hr_payroll.container"


def get_container():
    return current_app.extensions[CONTAINER_KEY]


def store_session_user(user: SessionUser) -> None:
    session.clear()
    session["user_id"] = user.user_id
    session["employee_id"] = user.employee_id
    session["employee_code"] = user.employee_code
    session["name"] = user.full_name
    session["role"] = user.role.value


def current_user() -> SessionUser:
    if "user_id" not in session:
        raise AuthenticationError("Unauthorized")
    return SessionUser(
        user_id=int(session["user_id"]),
        employee_id=int(session["employee_id"]),
        employee_code=str(session.get("employee_code", "")),
        full_name=str(session.get("name", "")),
        role=Role(session["role"]),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Unauthorized")
        return view(*args, **kwargs)

    return wrapper


def require_permission(module: str, action: PermissionAction):
    """Login plus a role grant for (module, action)."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if not get_container().permission_service.has_permission(user.role, module, action):
                logger.warning("Permission denied: %s on %s/%s", user.role.value, module, action.value)
                raise AuthorizationError("You do not have permission to perform this action")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def require_roles(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user.role not in roles:
                logger.warning("Role %s denied for %s", user.role.value, request.path)
                raise AuthorizationError("Forbidden")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_int(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


def to_jsonable(value: Any) -> Any:
    """Dataclasses become camelCase dicts, Decimals floats, dates ISO strings."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {_camel(f.name): to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return value


def json_response(value: Any, status: int = 200):
    return jsonify(to_jsonable(value)), status
