from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """No punch at all for the day."""

    def decide(self, *, work_date: date, check_in: Optional[datetime], shift: Optional[Shift]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)
