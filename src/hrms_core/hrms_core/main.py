"""Scheduler entry point: one invocation runs one batch job and exits.

    python -m hrms_core.main daily-attendance --org 1 --date 2026-02-02
    python -m hrms_core.main monthly-payroll --org 1 --month 2 --year 2026 --reclassify
    python -m hrms_core.main import-attendance --org 1 --file attendance.xlsx
    python -m hrms_core.main validate-location --org 1 --lat 10.77 --lon 106.70 --employee 5
"""

from __future__ import annotations

import argparse
import importlib
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from config import get_settings_module

from .common.datetime_utils import month_bounds, now_local, parse_iso_date
from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("hrms_core")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hrms_core", description="Attendance and payroll batch jobs")
    sub = parser.add_subparsers(dest="command", required=True)

    daily = sub.add_parser("daily-attendance", help="Classify one day of attendance for an organization")
    daily.add_argument("--org", type=int, required=True)
    daily.add_argument("--date", type=parse_iso_date, default=None, help="YYYY-MM-DD (default: today)")

    payroll = sub.add_parser("monthly-payroll", help="Process payroll for one month")
    payroll.add_argument("--org", type=int, required=True)
    payroll.add_argument("--month", type=int, required=True)
    payroll.add_argument("--year", type=int, required=True)
    payroll.add_argument(
        "--reclassify",
        action="store_true",
        help=(
            "Classify every day of the month from punches first; days without punches become ABSENT, "
            "replacing imported or LEAVE/HOLIDAY records"
        ),
    )
    payroll.add_argument("--force", action="store_true", help="Replace unpaid payroll records of the period")

    imp = sub.add_parser("import-attendance", help="Import attendance from an .xlsx or .csv file")
    imp.add_argument("--org", type=int, required=True)
    imp.add_argument("--file", type=Path, required=True)

    geo = sub.add_parser("validate-location", help="Check a coordinate against the geo-fences")
    geo.add_argument("--org", type=int, required=True)
    geo.add_argument("--lat", type=float, required=True)
    geo.add_argument("--lon", type=float, required=True)
    geo.add_argument("--employee", type=int, default=None)

    return parser


def _install_cancel_handler() -> threading.Event:
    cancel = threading.Event()

    def _handler(signum, frame):
        logger.warning("Cancellation requested; finishing the employees already started")
        cancel.set()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)
    return cancel


def _print_errors(errors) -> None:
    for err in errors:
        print(f"  - [{err.kind.value}] {err.describe()}")


def run_daily_attendance(container: Container, args, cancel: threading.Event) -> int:
    work_date = args.date or now_local().date()
    result = container.attendance_service.process_attendance_batch(args.org, work_date, cancel_event=cancel)
    print(f"Processed {result.processed_count} attendance records for {work_date.isoformat()}")
    _print_errors(result.errors)
    return 1 if result.errors or result.cancelled else 0


def run_monthly_payroll(container: Container, args, cancel: threading.Event) -> int:
    if args.reclassify:
        first, last = month_bounds(args.year, args.month)
        attendance = container.attendance_service.process_attendance_range(args.org, first, last, cancel_event=cancel)
        print(f"Reclassified attendance: {attendance.processed_count} employee-days with punches")
        _print_errors(attendance.errors)
        if attendance.cancelled:
            return 1

    result = container.payroll_service.process_payroll(
        args.org, args.month, args.year, force_reprocess=args.force, cancel_event=cancel
    )
    print(f"Processed payroll for {result.processed_count} employees ({args.month:02d}/{args.year})")
    if result.skipped:
        print(f"Skipped {len(result.skipped)}:")
        _print_errors(result.skipped)
    _print_errors(result.errors)
    return 1 if result.errors or result.cancelled else 0


def run_import(container: Container, args, cancel: threading.Event) -> int:
    result = container.import_service.import_attendance(args.org, args.file.read_bytes())
    print(f"Imported {result.success} of {result.total} rows ({result.skipped} skipped)")
    for message in result.errors:
        print(f"  - {message}")
    return 1 if result.errors else 0


def run_validate_location(container: Container, args, cancel: threading.Event) -> int:
    result = container.geofence_service.validate_location(args.org, args.lat, args.lon, args.employee)
    distance = f"{result.distance_meters:.1f} m" if result.distance_meters is not None else "n/a"
    print(f"valid={result.is_valid} distance={distance} matched={result.matched_fence_id} nearest={result.nearest_fence_id}")
    if result.message:
        print(result.message)
    return 0 if result.is_valid else 1


_COMMANDS = {
    "daily-attendance": run_daily_attendance,
    "monthly-payroll": run_monthly_payroll,
    "import-attendance": run_import,
    "validate-location": run_validate_location,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format=getattr(settings, "LOG_FORMAT", "%(asctime)s %(levelname)s %(name)s: %(message)s"),
    )
    db_config = getattr(settings, "DB_CONFIG")
    logger.debug(
        "settings=%s db=%s@%s:%s/%s",
        settings_module, db_config.get("user"), db_config.get("host"), db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.debug("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(db_config=db_config, settings=settings)
    cancel = _install_cancel_handler()
    try:
        return _COMMANDS[args.command](container, args, cancel)
    except DomainError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
