from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Organization:
    organization_id: int
    company_name: str
