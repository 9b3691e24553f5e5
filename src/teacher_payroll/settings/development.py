import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "teacher_payroll"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Tenant used when a request carries no school scope (legacy single-school data)
PAYROLL_DEFAULT_TENANT = os.getenv("PAYROLL_DEFAULT_TENANT", "default")
# Upper bound on concurrent per-teacher calculations in batch reports
PAYROLL_BATCH_WORKERS = int(os.getenv("PAYROLL_BATCH_WORKERS", "4"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
