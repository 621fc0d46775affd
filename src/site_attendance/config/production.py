import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_attendance"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

BATCH_MAX_WORKERS = int(os.getenv("BATCH_MAX_WORKERS", "8"))
BATCH_PERSIST_ATTEMPTS = int(os.getenv("BATCH_PERSIST_ATTEMPTS", "3"))
BATCH_RETRY_BACKOFF_SECONDS = float(os.getenv("BATCH_RETRY_BACKOFF_SECONDS", "2"))
