from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.batch import ItemError
from ..core.enums import AttendanceStatus, EventSource
from ..geofence.model import GeoPoint


@dataclass(frozen=True)
class DeviceInfo:
    verification_mode: Optional[str] = None
    device_os: Optional[str] = None
    device_type: Optional[str] = None
    ip_address: Optional[str] = None
    device_key: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class RawAttendanceEvent:
    """Append-only raw punch. ``employee_id`` stays None until reconciled."""

    organization_id: int
    employee_id: Optional[int]
    punched_at: datetime
    source: EventSource
    location: Optional[GeoPoint] = None
    device: Optional[DeviceInfo] = None
    log_id: Optional[int] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (employee_id, work_date)."""

    organization_id: int
    employee_id: int
    work_date: date
    shift_id: Optional[int]
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    late_minutes: int = 0
    early_exit_minutes: int = 0
    overtime_minutes: int = 0
    worked_minutes: int = 0
    attendance_id: Optional[int] = None

    @property
    def key(self) -> tuple[int, date]:
        return self.employee_id, self.work_date


@dataclass(frozen=True)
class AttendanceBatchResult:
    processed_count: int
    errors: list[ItemError]
    cancelled: bool = False
    not_started: int = 0


@dataclass(frozen=True)
class ImportRow:
    """One successfully parsed spreadsheet row."""

    row_number: int
    employee_code: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    shift_name: Optional[str] = None


@dataclass(frozen=True)
class ParsedSheet:
    rows: list[ImportRow]
    errors: list[str]


@dataclass(frozen=True)
class ImportResult:
    success: int
    skipped: int
    total: int
    errors: list[str]
