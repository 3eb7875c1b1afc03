from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision


class UnscheduledStrategy(AttendanceStrategy):
    """Punched in but no shift is configured: lateness cannot be evaluated."""

    def decide(self, *, work_date: date, check_in: Optional[datetime], shift: Optional[Shift]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
