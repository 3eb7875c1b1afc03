from __future__ import annotations

import logging

from ..employees.repository import EmployeeRepository
from ..shifts.repository import ShiftRepository
from .classifier import worked_minutes
from .importer import parse_attendance_sheet
from .model import AttendanceRecord, ImportResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceImportService:
    """Bulk import of attendance from a spreadsheet.

    Insert-or-skip: a row whose (employee, date) already exists, in storage or
    earlier in the same file, is reported and skipped. Imported rows are taken
    at face value, so late and overtime minutes are zero.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository, shifts: ShiftRepository):
        self._attendance = attendance
        self._employees = employees
        self._shifts = shifts

    def import_attendance(self, organization_id: int, data: bytes) -> ImportResult:
        organization_id = int(organization_id)
        sheet = parse_attendance_sheet(data)
        errors = list(sheet.errors)

        employees_by_code = {
            e.employee_code.strip().lower(): e
            for e in self._employees.list_for_organization(organization_id, active_only=False)
        }
        shifts_by_name = {s.shift_name.strip().lower(): s for s in self._shifts.list_for_organization(organization_id)}

        resolved = []
        for row in sheet.rows:
            employee = employees_by_code.get(row.employee_code.lower())
            if employee is None:
                errors.append(f"Row {row.row_number}: Employee not found: {row.employee_code}")
                continue
            resolved.append((row, employee))

        existing = self._attendance.existing_keys(
            organization_id, [(employee.employee_id, row.work_date) for row, employee in resolved]
        )

        to_insert: list[AttendanceRecord] = []
        seen: set = set()
        for row, employee in resolved:
            key = (employee.employee_id, row.work_date)
            if key in existing or key in seen:
                errors.append(
                    f"Row {row.row_number}: Attendance record already exists for "
                    f"{row.employee_code} on {row.work_date.isoformat()}"
                )
                continue
            seen.add(key)

            shift_id = employee.current_shift_id
            if row.shift_name:
                shift = shifts_by_name.get(row.shift_name.lower())
                if shift is not None:
                    shift_id = shift.shift_id
                else:
                    logger.warning(
                        "Row %s: unknown shift %r, using current shift of %s",
                        row.row_number, row.shift_name, row.employee_code,
                    )

            to_insert.append(
                AttendanceRecord(
                    organization_id=organization_id,
                    employee_id=employee.employee_id,
                    work_date=row.work_date,
                    shift_id=shift_id,
                    check_in_time=row.check_in_time,
                    check_out_time=row.check_out_time,
                    status=row.status,
                    worked_minutes=worked_minutes(row.check_in_time, row.check_out_time),
                )
            )

        success = 0
        if to_insert:
            try:
                success = self._attendance.insert_many(to_insert)
            except Exception as exc:
                logger.exception("Bulk attendance insert failed for organization %s", organization_id)
                errors.append(f"Database error: {exc}")
                success = 0

        total = len(sheet.rows)
        result = ImportResult(success=success, skipped=total - success, total=total, errors=errors)
        logger.info(
            "Attendance import for organization %s: %d imported, %d skipped, %d errors",
            organization_id, result.success, result.skipped, len(result.errors),
        )
        return result
