from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .attendance.factory import AttendanceStrategyFactory
from .attendance.import_service import AttendanceImportService
from .attendance.mysql_attendance_log_repository import MySQLAttendanceLogRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_BATCH_MAX_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .geofence.mysql_geofence_repository import MySQLGeoFenceRepository
from .geofence.service import GeoFenceService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .leave.mysql_leave_repository import MySQLLeaveBalanceRepository
from .leave.service import LeaveBalanceLedger
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.mysql_salary_structure_repository import MySQLSalaryStructureRepository
from .payroll.policy import PayrollPolicy
from .payroll.service import PayrollService
from .shifts.mysql_shift_repository import MySQLShiftRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    shifts_repo: MySQLShiftRepository
    holidays_repo: MySQLHolidayRepository
    geofences_repo: MySQLGeoFenceRepository
    attendance_logs_repo: MySQLAttendanceLogRepository
    attendance_repo: MySQLAttendanceRepository
    salary_structures_repo: MySQLSalaryStructureRepository
    payrolls_repo: MySQLPayrollRepository
    leave_balances_repo: MySQLLeaveBalanceRepository

    geofence_service: GeoFenceService
    attendance_service: AttendanceService
    import_service: AttendanceImportService
    leave_ledger: LeaveBalanceLedger
    payroll_service: PayrollService


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    max_workers = int(getattr(settings, "BATCH_MAX_WORKERS", DEFAULT_BATCH_MAX_WORKERS))

    employees_repo = MySQLEmployeeRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    geofences_repo = MySQLGeoFenceRepository(conn)
    attendance_logs_repo = MySQLAttendanceLogRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    salary_structures_repo = MySQLSalaryStructureRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)
    leave_balances_repo = MySQLLeaveBalanceRepository(conn)

    geofence_service = GeoFenceService(
        geofences_repo,
        fail_open=bool(getattr(settings, "GEOFENCE_FAIL_OPEN", True)),
    )
    attendance_service = AttendanceService(
        attendance_repo,
        attendance_logs_repo,
        employees_repo,
        shifts_repo,
        geofence_service,
        strategy_factory=AttendanceStrategyFactory(),
        max_workers=max_workers,
    )
    import_service = AttendanceImportService(attendance_repo, employees_repo, shifts_repo)
    leave_ledger = LeaveBalanceLedger(leave_balances_repo)
    payroll_service = PayrollService(
        payrolls_repo,
        salary_structures_repo,
        attendance_repo,
        employees_repo,
        shifts_repo,
        holidays_repo,
        leave_ledger,
        policy=PayrollPolicy.from_settings(settings),
        max_workers=max_workers,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        shifts_repo=shifts_repo,
        holidays_repo=holidays_repo,
        geofences_repo=geofences_repo,
        attendance_logs_repo=attendance_logs_repo,
        attendance_repo=attendance_repo,
        salary_structures_repo=salary_structures_repo,
        payrolls_repo=payrolls_repo,
        leave_balances_repo=leave_balances_repo,
        geofence_service=geofence_service,
        attendance_service=attendance_service,
        import_service=import_service,
        leave_ledger=leave_ledger,
        payroll_service=payroll_service,
    )
