import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "teacher_payroll"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PAYROLL_DEFAULT_TENANT = os.getenv("PAYROLL_DEFAULT_TENANT", "default")
PAYROLL_BATCH_WORKERS = int(os.getenv("PAYROLL_BATCH_WORKERS", "4"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
