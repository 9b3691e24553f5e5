import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, 'development' by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "teacher_payroll.settings.production"

    if env in {"test", "testing"}:
        return "teacher_payroll.settings.testing"

    return "teacher_payroll.settings.development"
