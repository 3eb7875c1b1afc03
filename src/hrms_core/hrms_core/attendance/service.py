from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.batch import run_bounded
from ..common.datetime_utils import iter_days, now_local, start_of_day
from ..core.constants import DEFAULT_BATCH_MAX_WORKERS
from ..core.enums import EventSource
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..geofence.model import GeoPoint
from ..geofence.service import GeoFenceService
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from .classifier import classify_day
from .factory import AttendanceStrategyFactory
from .model import AttendanceBatchResult, AttendanceRecord, DeviceInfo, RawAttendanceEvent
from .repository import AttendanceLogRepository, AttendanceRepository

logger = logging.getLogger(__name__)


def _day_window(work_date: date, shift: Optional[Shift]) -> tuple[datetime, datetime]:
    if shift is not None:
        return shift.punch_window(work_date)
    start = start_of_day(work_date)
    return start, start + timedelta(days=1)


class AttendanceService:
    """Use cases: record punches and classify employee-days.

    Re-classifying a day replaces the stored record (idempotent upsert). Bulk
    import uses insert-or-skip instead, see ``AttendanceImportService``.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        logs: AttendanceLogRepository,
        employees: EmployeeRepository,
        shifts: ShiftRepository,
        geofences: GeoFenceService | None = None,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        max_workers: int = DEFAULT_BATCH_MAX_WORKERS,
    ):
        self._attendance = attendance
        self._logs = logs
        self._employees = employees
        self._shifts = shifts
        self._geofences = geofences
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._max_workers = int(max_workers)

    def record_punch(
        self,
        *,
        organization_id: int,
        employee_id: Optional[int],
        source: EventSource,
        punched_at: datetime | None = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        device: Optional[DeviceInfo] = None,
        skip_geo_validation: bool = False,
    ) -> RawAttendanceEvent:
        punched_at = punched_at or now_local()

        location = None
        if latitude is not None and longitude is not None:
            location = GeoPoint(latitude=float(latitude), longitude=float(longitude))

        if source == EventSource.MOBILE and location and self._geofences and not skip_geo_validation:
            validation = self._geofences.validate_location(organization_id, latitude, longitude, employee_id)
            if not validation.is_valid:
                raise ValidationError(f"Check-in location is outside allowed area. {validation.message}")

        event = RawAttendanceEvent(
            organization_id=int(organization_id),
            employee_id=int(employee_id) if employee_id is not None else None,
            punched_at=punched_at,
            source=source,
            location=location,
            device=device,
        )
        log_id = self._logs.append(event)
        return replace(event, log_id=log_id)

    def _shift_for(self, employee: Employee, shifts_by_id: dict[int, Shift] | None = None) -> Optional[Shift]:
        if employee.current_shift_id is None:
            return None
        if shifts_by_id is not None:
            shift = shifts_by_id.get(employee.current_shift_id)
        else:
            shift = self._shifts.get_by_id(employee.current_shift_id)
        if shift is None:
            raise NotFoundError(
                f"Shift {employee.current_shift_id} assigned to employee {employee.employee_id} not found"
            )
        return shift

    def classify_day(self, employee_id: int, work_date: date) -> AttendanceRecord:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")

        shift = self._shift_for(employee)
        start, end = _day_window(work_date, shift)
        events = self._logs.list_between(employee.organization_id, start=start, end=end, employee_id=employee.employee_id)

        record = classify_day(
            organization_id=employee.organization_id,
            employee_id=employee.employee_id,
            work_date=work_date,
            shift=shift,
            events=events,
            factory=self._factory,
        )
        return self._attendance.upsert(record)

    def process_attendance_batch(
        self,
        organization_id: int,
        work_date: date,
        *,
        cancel_event: threading.Event | None = None,
    ) -> AttendanceBatchResult:
        return self.process_attendance_range(organization_id, work_date, work_date, cancel_event=cancel_event)

    def process_attendance_range(
        self,
        organization_id: int,
        start: date,
        end: date,
        *,
        cancel_event: threading.Event | None = None,
    ) -> AttendanceBatchResult:
        """Classify every active employee for every day in [start, end].

        ``processed_count`` is the number of employee-days that had at least one
        punch; days classified ABSENT are still written.

        Employees, shifts and punches are fetched once; each worker then owns one
        employee and writes that employee's days in date order.
        """
        if end < start:
            raise ValidationError("end date must be >= start date")

        employees = self._employees.list_for_organization(int(organization_id), active_only=True)
        shifts_by_id = {s.shift_id: s for s in self._shifts.list_for_organization(int(organization_id))}

        # Overnight windows can reach into the neighbouring days.
        events = self._logs.list_between(
            int(organization_id),
            start=start_of_day(start - timedelta(days=1)),
            end=start_of_day(end + timedelta(days=2)),
        )
        events_by_employee: dict[int, list[RawAttendanceEvent]] = defaultdict(list)
        for event in events:
            if event.employee_id is not None:
                events_by_employee[event.employee_id].append(event)

        days = list(iter_days(start, end))
        logger.info(
            "Processing attendance for organization %s, %s..%s (%d employees)",
            organization_id, start, end, len(employees),
        )

        def work(employee: Employee) -> int:
            shift = self._shift_for(employee, shifts_by_id)
            own_events = events_by_employee.get(employee.employee_id, [])
            punched_days = 0
            for day in days:
                window_start, window_end = _day_window(day, shift)
                day_events = [e for e in own_events if window_start <= e.punched_at < window_end]
                record = classify_day(
                    organization_id=int(organization_id),
                    employee_id=employee.employee_id,
                    work_date=day,
                    shift=shift,
                    events=day_events,
                    factory=self._factory,
                )
                self._attendance.upsert(record)
                if day_events:
                    punched_days += 1
            # ABSENT days are stored but not counted as processed.
            return punched_days

        outcome = run_bounded(
            employees,
            work,
            key=lambda e: e.employee_id,
            max_workers=self._max_workers,
            cancel_event=cancel_event,
        )
        result = AttendanceBatchResult(
            processed_count=sum(outcome.results),
            errors=outcome.errors,
            cancelled=outcome.cancelled,
            not_started=outcome.not_started,
        )
        logger.info(
            "Attendance processed for organization %s: %d punched employee-days, %d errors%s",
            organization_id, result.processed_count, len(result.errors),
            " (cancelled)" if result.cancelled else "",
        )
        return result
