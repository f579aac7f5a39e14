from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Login account. Employment attributes live on Employee."""

    user_id: int
    email: str
    full_name: str
    password_hash: str
    is_active: bool = True
