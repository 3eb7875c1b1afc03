from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import Shift


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    late_minutes: int = 0


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a day's attendance status."""

    @abstractmethod
    def decide(self, *, work_date: date, check_in: Optional[datetime], shift: Optional[Shift]) -> StatusDecision:
        raise NotImplementedError
