import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEVIATION_THRESHOLD_MINUTES = int(os.getenv("DEVIATION_THRESHOLD_MINUTES", "5"))
DEVIATION_MARGIN_MINUTES = int(os.getenv("DEVIATION_MARGIN_MINUTES", "5"))
AUTO_APPROVE_WITHIN_MARGIN = bool(int(os.getenv("AUTO_APPROVE_WITHIN_MARGIN", "0")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
