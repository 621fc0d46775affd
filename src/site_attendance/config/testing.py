import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_attendance_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

BATCH_MAX_WORKERS = 2
BATCH_PERSIST_ATTEMPTS = 3
BATCH_RETRY_BACKOFF_SECONDS = 0.0
