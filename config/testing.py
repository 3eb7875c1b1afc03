import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_test_db"),
    "connection_timeout": 5,
}

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

BATCH_MAX_WORKERS = 2
GEOFENCE_FAIL_OPEN = True

LATE_PENALTY_AMOUNT = "100"
OVERTIME_MULTIPLIER = "1.5"
STANDARD_HOURS_PER_DAY = 8
PF_RATE = "0.12"
TAX_SLABS = (("250000", "0.05"), ("500000", "0.20"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
