from datetime import date, datetime, time

from src.hrms_core.hrms_core.attendance.factory import AttendanceStrategyFactory
from src.hrms_core.hrms_core.attendance.strategies.absent_strategy import AbsentStrategy
from src.hrms_core.hrms_core.attendance.strategies.late_strategy import LateStrategy
from src.hrms_core.hrms_core.attendance.strategies.normal_strategy import NormalStrategy
from src.hrms_core.hrms_core.attendance.strategies.unscheduled_strategy import UnscheduledStrategy
from src.hrms_core.hrms_core.core.enums import AttendanceStatus
from src.hrms_core.hrms_core.shifts.model import Shift

DAY = date(2026, 2, 2)


def _shift(**kwargs):
    values = dict(shift_id=1, organization_id=1, shift_name="Day", start_time=time(9, 0), end_time=time(17, 0))
    values.update(kwargs)
    return Shift(**values)


def test_factory_no_checkin_is_absent():
    factory = AttendanceStrategyFactory()
    assert isinstance(factory.for_day(work_date=DAY, check_in=None, shift=_shift()), AbsentStrategy)


def test_factory_without_shift_is_unscheduled():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_day(work_date=DAY, check_in=datetime(2026, 2, 2, 11, 0), shift=None)

    assert isinstance(strategy, UnscheduledStrategy)
    assert strategy.decide(work_date=DAY, check_in=datetime(2026, 2, 2, 11, 0), shift=None).status == AttendanceStatus.PRESENT


def test_factory_checkin_on_grace_boundary_is_on_time():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_day(work_date=DAY, check_in=datetime(2026, 2, 2, 9, 15), shift=_shift())

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_after_grace_is_late():
    factory = AttendanceStrategyFactory()
    check_in = datetime(2026, 2, 2, 9, 15, 1)
    strategy = factory.for_day(work_date=DAY, check_in=check_in, shift=_shift())

    assert isinstance(strategy, LateStrategy)
    # 1 second late floors to 0 minutes
    assert strategy.decide(work_date=DAY, check_in=check_in, shift=_shift()).late_minutes == 0
