import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "hrms"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_db"),
    "connection_timeout": int(os.getenv("DB_CONNECTION_TIMEOUT", "30")),
}

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s %(levelname)s %(name)s: %(message)s")

BATCH_MAX_WORKERS = int(os.getenv("BATCH_MAX_WORKERS", "8"))
GEOFENCE_FAIL_OPEN = bool(int(os.getenv("GEOFENCE_FAIL_OPEN", "1")))

LATE_PENALTY_AMOUNT = os.getenv("LATE_PENALTY_AMOUNT", "100")
OVERTIME_MULTIPLIER = os.getenv("OVERTIME_MULTIPLIER", "1.5")
STANDARD_HOURS_PER_DAY = int(os.getenv("STANDARD_HOURS_PER_DAY", "8"))
PF_RATE = os.getenv("PF_RATE", "0.12")
TAX_SLABS = (("250000", "0.05"), ("500000", "0.20"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
