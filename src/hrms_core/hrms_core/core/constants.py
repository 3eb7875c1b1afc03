"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Payroll policy values are only defaults; runtime values come from settings.
"""

from datetime import date
from decimal import Decimal

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_LATE_GRACE_MINUTES = 15
DEFAULT_EARLY_EXIT_GRACE_MINUTES = 0

DEFAULT_LATE_PENALTY_AMOUNT = Decimal("100")
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_STANDARD_HOURS_PER_DAY = 8
DEFAULT_PF_RATE = Decimal("0.12")
# (lower bound, marginal rate) pairs, progressive.
DEFAULT_TAX_SLABS = (
    (Decimal("250000"), Decimal("0.05")),
    (Decimal("500000"), Decimal("0.20")),
)

OVERTIME_ALLOWANCE_KEY = "Overtime"
MONEY_QUANTUM = Decimal("0.01")

DEFAULT_BATCH_MAX_WORKERS = 4
DEFAULT_STORAGE_TIMEOUT_SECONDS = 30

# Spreadsheet serial day 0 (1900 date system, including the 1900 leap-year quirk).
SPREADSHEET_EPOCH = date(1899, 12, 30)
