from __future__ import annotations

import importlib
import os

from hr_payroll.database.bootstrap import ensure_demo_admin, seed_role_permissions
from hr_payroll.settings import get_settings_module


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    seed_role_permissions(db_config)
    ensure_demo_admin(
        db_config,
        company_name=settings.COMPANY_NAME,
        email=os.getenv("ADMIN_EMAIL", "admin@example.com"),
        password=os.getenv("ADMIN_PASSWORD", "admin123"),
    )
    print("OK: Seeded role permissions and demo admin")


if __name__ == "__main__":
    main()
