import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Timesheet deviation handling
DEVIATION_THRESHOLD_MINUTES = int(os.getenv("DEVIATION_THRESHOLD_MINUTES", "5"))
DEVIATION_MARGIN_MINUTES = int(os.getenv("DEVIATION_MARGIN_MINUTES", "5"))
AUTO_APPROVE_WITHIN_MARGIN = bool(int(os.getenv("AUTO_APPROVE_WITHIN_MARGIN", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed a demo wage ladder on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
