from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..shifts.model import Shift
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.unscheduled_strategy import UnscheduledStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_day(self, *, work_date: date, check_in: Optional[datetime], shift: Optional[Shift]) -> AttendanceStrategy:
        if check_in is None:
            return AbsentStrategy()
        if not shift:
            return UnscheduledStrategy()

        # Strictly after the grace window is late; exactly on the boundary is on time.
        if check_in > shift.late_after(work_date):
            return LateStrategy()
        return NormalStrategy()
