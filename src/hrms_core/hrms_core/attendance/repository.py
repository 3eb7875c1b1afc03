from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceRecord, RawAttendanceEvent


class AttendanceLogRepository(Protocol):
    """Append-only store of raw punches."""

    def append(self, event: RawAttendanceEvent) -> int:
        raise NotImplementedError

    def list_between(
        self,
        organization_id: int,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
    ) -> Sequence[RawAttendanceEvent]:
        """Punches with ``start <= punched_at < end``, oldest first."""

        raise NotImplementedError


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or replace the row for (employee_id, work_date); returns the stored row."""

        raise NotImplementedError

    def existing_keys(self, organization_id: int, keys: Iterable[tuple[int, date]]) -> set[tuple[int, date]]:
        raise NotImplementedError

    def insert_many(self, records: Sequence[AttendanceRecord]) -> int:
        """Insert new rows in one transaction; a duplicate key fails the whole call."""

        raise NotImplementedError

    def list_between(
        self,
        organization_id: int,
        *,
        start: date,
        end: date,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
