from datetime import date, datetime, time
from decimal import Decimal

from src.hrms_core.hrms_core.attendance.classifier import classify_day, first_and_last_punch
from src.hrms_core.hrms_core.attendance.model import RawAttendanceEvent
from src.hrms_core.hrms_core.core.enums import AttendanceStatus, EventSource
from src.hrms_core.hrms_core.shifts.model import OvertimeRule, Shift

DAY = date(2026, 2, 2)
SHIFT = Shift(
    shift_id=7,
    organization_id=1,
    shift_name="Day",
    start_time=time(9, 0),
    end_time=time(17, 0),
    late_grace_minutes=15,
    early_exit_grace_minutes=0,
)


def _punch(hh, mm, day=DAY):
    return RawAttendanceEvent(
        organization_id=1,
        employee_id=10,
        punched_at=datetime.combine(day, time(hh, mm)),
        source=EventSource.BIOMETRIC,
    )


def _classify(events, shift=SHIFT, work_date=DAY):
    return classify_day(organization_id=1, employee_id=10, work_date=work_date, shift=shift, events=events)


def test_no_events_is_absent_with_zero_durations():
    record = _classify([])

    assert record.status == AttendanceStatus.ABSENT
    assert record.check_in_time is None
    assert record.check_out_time is None
    assert (record.late_minutes, record.overtime_minutes, record.early_exit_minutes, record.worked_minutes) == (0, 0, 0, 0)
    assert record.shift_id == 7


def test_checkin_within_grace_is_present():
    record = _classify([_punch(9, 10), _punch(17, 0)])

    assert record.status == AttendanceStatus.PRESENT
    assert record.late_minutes == 0


def test_checkin_after_grace_is_late_counted_from_grace_end():
    record = _classify([_punch(9, 20), _punch(17, 0)])

    assert record.status == AttendanceStatus.LATE
    assert record.late_minutes == 5


def test_overtime_only_positive():
    assert _classify([_punch(9, 0), _punch(17, 45)]).overtime_minutes == 45
    assert _classify([_punch(9, 0), _punch(16, 50)]).overtime_minutes == 0


def test_early_exit_is_measured_against_shift_end():
    record = _classify([_punch(9, 0), _punch(16, 50)])

    assert record.early_exit_minutes == 10
    assert record.status == AttendanceStatus.PRESENT


def test_single_punch_has_no_checkout():
    record = _classify([_punch(9, 30)])

    assert record.check_in_time == datetime(2026, 2, 2, 9, 30)
    assert record.check_out_time is None
    assert record.status == AttendanceStatus.LATE
    assert record.overtime_minutes == 0
    assert record.worked_minutes == 0


def test_middle_punches_are_ignored():
    check_in, check_out = first_and_last_punch([_punch(13, 0), _punch(17, 30), _punch(9, 5), _punch(12, 0)])

    assert check_in == datetime(2026, 2, 2, 9, 5)
    assert check_out == datetime(2026, 2, 2, 17, 30)


def test_no_shift_is_present_with_zero_durations():
    record = _classify([_punch(11, 0), _punch(20, 0)], shift=None)

    assert record.status == AttendanceStatus.PRESENT
    assert record.shift_id is None
    assert (record.late_minutes, record.overtime_minutes, record.early_exit_minutes) == (0, 0, 0)
    assert record.worked_minutes == 9 * 60


def test_classification_is_idempotent():
    events = [_punch(9, 20), _punch(18, 2)]

    assert _classify(events) == _classify(list(reversed(events)))


def test_overtime_below_rule_minimum_is_not_recorded():
    shift = Shift(
        shift_id=8,
        organization_id=1,
        shift_name="Strict",
        start_time=time(9, 0),
        end_time=time(17, 0),
        overtime_rule=OvertimeRule(min_minutes=30, multiplier=Decimal("2")),
    )

    assert _classify([_punch(9, 0), _punch(17, 20)], shift=shift).overtime_minutes == 0
    assert _classify([_punch(9, 0), _punch(17, 40)], shift=shift).overtime_minutes == 40


def test_overnight_shift_uses_next_day_end():
    night = Shift(
        shift_id=9,
        organization_id=1,
        shift_name="Night",
        start_time=time(22, 0),
        end_time=time(6, 0),
        late_grace_minutes=10,
    )
    events = [_punch(22, 30), _punch(6, 45, day=date(2026, 2, 3))]

    record = _classify(events, shift=night)

    assert record.status == AttendanceStatus.LATE
    assert record.late_minutes == 20
    assert record.overtime_minutes == 45
    assert record.worked_minutes == 8 * 60 + 15


def test_overnight_punch_window_is_centred_on_shift():
    night = Shift(shift_id=9, organization_id=1, shift_name="Night", start_time=time(22, 0), end_time=time(6, 0))

    start, end = night.punch_window(DAY)

    assert start == datetime(2026, 2, 2, 14, 0)
    assert end == datetime(2026, 2, 3, 14, 0)
