from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, time

import pytest

from src.hrms_core.hrms_core.attendance.model import RawAttendanceEvent
from src.hrms_core.hrms_core.attendance.service import AttendanceService
from src.hrms_core.hrms_core.core.enums import AttendanceStatus, EmployeeStatus, ErrorKind, EventSource
from src.hrms_core.hrms_core.core.exceptions import NotFoundError, ValidationError
from src.hrms_core.hrms_core.employees.model import Employee
from src.hrms_core.hrms_core.geofence.model import GeoFence, GeoPoint
from src.hrms_core.hrms_core.geofence.service import GeoFenceService
from src.hrms_core.hrms_core.shifts.model import Shift

DAY = date(2026, 2, 2)


class FakeEmployeesRepo:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def list_for_organization(self, organization_id, *, active_only=True):
        return [
            e for e in self._by_id.values()
            if e.organization_id == organization_id and (e.is_active or not active_only)
        ]


class FakeShiftsRepo:
    def __init__(self, shifts):
        self._by_id = {s.shift_id: s for s in shifts}

    def get_by_id(self, shift_id):
        return self._by_id.get(int(shift_id))

    def list_for_organization(self, organization_id):
        return [s for s in self._by_id.values() if s.organization_id == organization_id]


class FakeLogsRepo:
    def __init__(self, events=()):
        self.events = list(events)

    def append(self, event):
        self.events.append(event)
        return len(self.events)

    def list_between(self, organization_id, *, start, end, employee_id=None):
        return sorted(
            (
                e for e in self.events
                if e.organization_id == organization_id
                and start <= e.punched_at < end
                and (employee_id is None or e.employee_id == employee_id)
            ),
            key=lambda e: e.punched_at,
        )


class FakeAttendanceRepo:
    def __init__(self):
        self.rows = {}
        self._lock = threading.Lock()
        self.upserts = 0

    def upsert(self, record):
        with self._lock:
            self.upserts += 1
            existing = self.rows.get(record.key)
            attendance_id = existing.attendance_id if existing else len(self.rows) + 1
            stored = replace(record, attendance_id=attendance_id)
            self.rows[record.key] = stored
            return stored

    def get_for_employee_and_date(self, employee_id, work_date):
        return self.rows.get((employee_id, work_date))


class FakeFencesRepo:
    def __init__(self, org_fences=(), employee_fences=None):
        self._org = list(org_fences)
        self._employee = dict(employee_fences or {})

    def list_active_for_organization(self, organization_id):
        return [f for f in self._org if f.organization_id == organization_id and f.is_active]

    def list_active_for_employee(self, organization_id, employee_id):
        return list(self._employee.get(employee_id, []))


SHIFT = Shift(shift_id=1, organization_id=1, shift_name="Day", start_time=time(9, 0), end_time=time(17, 0))


def _punch(employee_id, hh, mm, day=DAY):
    return RawAttendanceEvent(
        organization_id=1,
        employee_id=employee_id,
        punched_at=datetime.combine(day, time(hh, mm)),
        source=EventSource.BIOMETRIC,
    )


def _service(employees, events=(), shifts=(SHIFT,), geofences=None):
    attendance = FakeAttendanceRepo()
    logs = FakeLogsRepo(events)
    svc = AttendanceService(
        attendance,
        logs,
        FakeEmployeesRepo(employees),
        FakeShiftsRepo(shifts),
        geofences,
        max_workers=2,
    )
    return svc, attendance, logs


def test_classify_day_upserts_once_per_employee_day():
    employee = Employee(employee_id=10, organization_id=1, employee_code="E10", current_shift_id=1)
    svc, attendance, _ = _service([employee], [_punch(10, 9, 20), _punch(10, 17, 45)])

    first = svc.classify_day(10, DAY)
    second = svc.classify_day(10, DAY)

    assert len(attendance.rows) == 1
    assert first == second
    assert first.status == AttendanceStatus.LATE
    assert first.late_minutes == 5
    assert first.overtime_minutes == 45


def test_classify_day_missing_employee_raises():
    svc, _, _ = _service([])

    with pytest.raises(NotFoundError):
        svc.classify_day(99, DAY)


def test_batch_collects_per_employee_errors_without_aborting():
    employees = [
        Employee(employee_id=1, organization_id=1, employee_code="E1", current_shift_id=1),
        Employee(employee_id=2, organization_id=1, employee_code="E2", current_shift_id=404),
        Employee(employee_id=3, organization_id=1, employee_code="E3", current_shift_id=1),
    ]
    svc, attendance, _ = _service(employees, [_punch(1, 9, 0), _punch(1, 17, 0)])

    result = svc.process_attendance_batch(1, DAY)

    assert result.processed_count == 1
    assert [(e.item_id, e.kind) for e in result.errors] == [(2, ErrorKind.NOT_FOUND)]
    assert attendance.rows[(1, DAY)].status == AttendanceStatus.PRESENT
    assert attendance.rows[(3, DAY)].status == AttendanceStatus.ABSENT
    assert (2, DAY) not in attendance.rows


def test_batch_skips_inactive_employees():
    employees = [
        Employee(employee_id=1, organization_id=1, employee_code="E1", current_shift_id=1),
        Employee(employee_id=2, organization_id=1, employee_code="E2", current_shift_id=1, status=EmployeeStatus.RESIGNED),
    ]
    svc, attendance, _ = _service(employees)

    result = svc.process_attendance_batch(1, DAY)

    assert result.processed_count == 0
    assert list(attendance.rows) == [(1, DAY)]


def test_absent_days_are_written_but_not_counted():
    employees = [
        Employee(employee_id=1, organization_id=1, employee_code="E1", current_shift_id=1),
        Employee(employee_id=2, organization_id=1, employee_code="E2", current_shift_id=1),
    ]
    svc, attendance, _ = _service(employees, [_punch(1, 9, 0)])

    result = svc.process_attendance_range(1, DAY, date(2026, 2, 3))

    assert result.processed_count == 1
    assert result.errors == []
    assert len(attendance.rows) == 4
    assert attendance.rows[(2, DAY)].status == AttendanceStatus.ABSENT


def test_range_assigns_overnight_checkout_to_shift_day():
    night = Shift(shift_id=2, organization_id=1, shift_name="Night", start_time=time(22, 0), end_time=time(6, 0))
    employee = Employee(employee_id=5, organization_id=1, employee_code="N5", current_shift_id=2)
    events = [_punch(5, 22, 0), _punch(5, 6, 10, day=date(2026, 2, 3))]
    svc, attendance, _ = _service([employee], events, shifts=(night,))

    result = svc.process_attendance_range(1, DAY, date(2026, 2, 3))

    assert result.processed_count == 1
    monday = attendance.rows[(5, DAY)]
    assert monday.check_out_time == datetime(2026, 2, 3, 6, 10)
    assert monday.overtime_minutes == 10
    assert attendance.rows[(5, date(2026, 2, 3))].status == AttendanceStatus.ABSENT


def test_range_rejects_reversed_dates():
    svc, _, _ = _service([])

    with pytest.raises(ValidationError):
        svc.process_attendance_range(1, date(2026, 2, 3), DAY)


def test_cancelled_batch_starts_nothing():
    employees = [Employee(employee_id=i, organization_id=1, employee_code=f"E{i}", current_shift_id=1) for i in range(5)]
    svc, attendance, _ = _service(employees)
    cancel = threading.Event()
    cancel.set()

    result = svc.process_attendance_batch(1, DAY, cancel_event=cancel)

    assert result.cancelled is True
    assert result.not_started == 5
    assert result.processed_count == 0
    assert attendance.rows == {}


def test_record_punch_rejects_mobile_outside_fence():
    fence = GeoFence(geo_fence_id=1, organization_id=1, fence_name="HQ", center=GeoPoint(0.0, 0.0), radius_meters=100)
    geo = GeoFenceService(FakeFencesRepo([fence]))
    svc, _, logs = _service([], geofences=geo)

    with pytest.raises(ValidationError):
        svc.record_punch(organization_id=1, employee_id=10, source=EventSource.MOBILE, latitude=0.0, longitude=0.01)
    assert logs.events == []


def test_record_punch_appends_event_with_log_id():
    fence = GeoFence(geo_fence_id=1, organization_id=1, fence_name="HQ", center=GeoPoint(0.0, 0.0), radius_meters=100)
    geo = GeoFenceService(FakeFencesRepo([fence]))
    svc, _, logs = _service([], geofences=geo)

    event = svc.record_punch(
        organization_id=1,
        employee_id=10,
        source=EventSource.MOBILE,
        punched_at=datetime(2026, 2, 2, 9, 0),
        latitude=0.0,
        longitude=0.0,
    )

    assert event.log_id == 1
    assert event.location == GeoPoint(0.0, 0.0)
    assert len(logs.events) == 1


def test_record_punch_biometric_skips_geo_validation():
    fence = GeoFence(geo_fence_id=1, organization_id=1, fence_name="HQ", center=GeoPoint(0.0, 0.0), radius_meters=100)
    geo = GeoFenceService(FakeFencesRepo([fence]))
    svc, _, logs = _service([], geofences=geo)

    svc.record_punch(organization_id=1, employee_id=10, source=EventSource.BIOMETRIC, latitude=5.0, longitude=5.0)

    assert len(logs.events) == 1
