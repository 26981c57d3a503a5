import os

from config import _flag

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

LEAVE_SENIOR_BYPASS = _flag("LEAVE_SENIOR_BYPASS", "1")

AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
