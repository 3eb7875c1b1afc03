from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_EARLY_EXIT_GRACE_MINUTES, DEFAULT_LATE_GRACE_MINUTES


@dataclass(frozen=True)
class OvertimeRule:
    """Overtime below ``min_minutes`` does not count; ``multiplier`` overrides the payroll policy when set."""

    min_minutes: int = 0
    multiplier: Optional[Decimal] = None


@dataclass(frozen=True)
class Shift:
    """Domain entity: work-schedule template.

    Immutable once referenced by attendance records; edits create a new
    configuration that only future classification runs pick up.
    """

    shift_id: int
    organization_id: int
    shift_name: str
    start_time: time
    end_time: time
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    early_exit_grace_minutes: int = DEFAULT_EARLY_EXIT_GRACE_MINUTES
    overtime_rule: Optional[OvertimeRule] = None

    @property
    def wraps_midnight(self) -> bool:
        return self.end_time <= self.start_time

    def scheduled_start(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.start_time)

    def scheduled_end(self, work_date: date) -> datetime:
        end_date = work_date + timedelta(days=1) if self.wraps_midnight else work_date
        return datetime.combine(end_date, self.end_time)

    def late_after(self, work_date: date) -> datetime:
        return self.scheduled_start(work_date) + timedelta(minutes=int(self.late_grace_minutes))

    def early_exit_before(self, work_date: date) -> datetime:
        return self.scheduled_end(work_date) - timedelta(minutes=int(self.early_exit_grace_minutes))

    def punch_window(self, work_date: date) -> tuple[datetime, datetime]:
        """Half-open [start, end) window of punches that belong to ``work_date``.

        Day shifts use the calendar day. Overnight shifts use a 24h window
        centred on the shift so the morning check-out lands on the right day.
        """
        if not self.wraps_midnight:
            start = datetime.combine(work_date, time.min)
            return start, start + timedelta(days=1)

        length = self.scheduled_end(work_date) - self.scheduled_start(work_date)
        margin = (timedelta(days=1) - length) / 2
        start = self.scheduled_start(work_date) - margin
        return start, start + timedelta(days=1)
