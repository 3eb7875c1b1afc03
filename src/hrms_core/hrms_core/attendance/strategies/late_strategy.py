from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...common.datetime_utils import floor_minutes
from ...core.enums import AttendanceStatus
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in; minutes are counted from the end of the grace window."""

    def decide(self, *, work_date: date, check_in: Optional[datetime], shift: Optional[Shift]) -> StatusDecision:
        if check_in is None or shift is None:
            raise ValueError("LateStrategy needs a check-in and a shift")
        late_minutes = floor_minutes(check_in - shift.late_after(work_date))
        return StatusDecision(status=AttendanceStatus.LATE, late_minutes=max(late_minutes, 0))
