"""Daily attendance classification (pure, no I/O).

Only the first and last punch of a day matter: the earliest punch is the
check-in, the latest is the check-out when there is more than one punch.
Middle punches are ignored.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import floor_minutes
from ..shifts.model import Shift
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, RawAttendanceEvent

_DEFAULT_FACTORY = AttendanceStrategyFactory()


def first_and_last_punch(events: Sequence[RawAttendanceEvent]) -> tuple[Optional[datetime], Optional[datetime]]:
    if not events:
        return None, None
    stamps = sorted(e.punched_at for e in events)
    check_out = stamps[-1] if len(stamps) > 1 else None
    return stamps[0], check_out


def overtime_minutes(work_date: date, check_out: Optional[datetime], shift: Optional[Shift]) -> int:
    if check_out is None or shift is None:
        return 0
    shift_end = shift.scheduled_end(work_date)
    if check_out <= shift_end:
        return 0
    minutes = floor_minutes(check_out - shift_end)
    if shift.overtime_rule and minutes < shift.overtime_rule.min_minutes:
        return 0
    return max(minutes, 0)


def early_exit_minutes(work_date: date, check_out: Optional[datetime], shift: Optional[Shift]) -> int:
    if check_out is None or shift is None:
        return 0
    boundary = shift.early_exit_before(work_date)
    if check_out >= boundary:
        return 0
    return floor_minutes(boundary - check_out)


def worked_minutes(check_in: Optional[datetime], check_out: Optional[datetime]) -> int:
    if check_in is None or check_out is None:
        return 0
    return max(floor_minutes(check_out - check_in), 0)


def classify_day(
    *,
    organization_id: int,
    employee_id: int,
    work_date: date,
    shift: Optional[Shift],
    events: Sequence[RawAttendanceEvent],
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceRecord:
    """Turn one employee-day of punches into exactly one attendance record.

    The result depends only on the arguments, so re-running it with the same
    punches yields an identical record.
    """
    factory = factory or _DEFAULT_FACTORY
    check_in, check_out = first_and_last_punch(events)

    strategy = factory.for_day(work_date=work_date, check_in=check_in, shift=shift)
    decision = strategy.decide(work_date=work_date, check_in=check_in, shift=shift)

    return AttendanceRecord(
        organization_id=int(organization_id),
        employee_id=int(employee_id),
        work_date=work_date,
        shift_id=shift.shift_id if shift else None,
        check_in_time=check_in,
        check_out_time=check_out,
        status=decision.status,
        late_minutes=decision.late_minutes,
        early_exit_minutes=early_exit_minutes(work_date, check_out, shift),
        overtime_minutes=overtime_minutes(work_date, check_out, shift),
        worked_minutes=worked_minutes(check_in, check_out),
    )
