import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "hr_payroll.settings.production"

    if env in {"test", "testing"}:
        return "hr_payroll.settings.testing"

    return "hr_payroll.settings.development"
