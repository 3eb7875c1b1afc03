"""Normalize an attendance spreadsheet into import rows.

Expected layout (first worksheet, one header row, columns by position):

- A: Employee code
- B: Date (spreadsheet serial, YYYY-MM-DD or MM/DD/YYYY)
- C: Check-in time (HH:MM) (optional)
- D: Check-out time (HH:MM) (optional)
- E: Status (PRESENT/ABSENT/LATE/HALF_DAY/LEAVE/HOLIDAY) (optional)
- F: Shift name (optional)

Bad rows are reported and skipped; they never abort the whole sheet.
"""

from __future__ import annotations

import io
import zipfile
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

import pandas as pd

from ..core.constants import SPREADSHEET_EPOCH
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import ImportRow, ParsedSheet

COLUMN_COUNT = 6
_OVERFLOW_MARKER = "\x00overflow:"
_XLSX_MAGIC = b"PK\x03\x04"
_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%Y/%m/%d")
_VALID_STATUSES = {s.value for s in AttendanceStatus}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        # Numeric codes come back as 1001.0 from sheets with empty cells.
        value = int(value)
    return str(value).strip()


def _serial_to_date(serial: float) -> date:
    return SPREADSHEET_EPOCH + timedelta(days=int(serial))


def parse_sheet_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _serial_to_date(value)

    text = str(value).strip()
    try:
        return _serial_to_date(float(text))
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    # e.g. "2026-02-03 00:00:00" from a CSV export of a date column
    return datetime.fromisoformat(text).date()


def parse_sheet_time(value: Any) -> Optional[time]:
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.time().replace(microsecond=0)
    if isinstance(value, time):
        return value.replace(microsecond=0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Spreadsheet time cell: fraction of a day.
        if not 0 <= value < 1:
            raise ValueError(f"time fraction out of range: {value}")
        seconds = int(round(float(value) * 86400))
        return time(hour=seconds // 3600, minute=(seconds % 3600) // 60, second=seconds % 60)

    text = str(value).strip()
    if ":" not in text:
        # CSV exports of time cells carry the day fraction as text, e.g. "0.375".
        try:
            fraction = float(text)
        except ValueError:
            raise ValueError(f"expected HH:MM, got {value!r}")
        return parse_sheet_time(fraction)

    parts = text.split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"expected HH:MM, got {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    return time(hour=hours, minute=minutes, second=seconds)


def _fit_wide_line(fields: list[str]) -> list[str]:
    """Called by the CSV reader for a line with more than COLUMN_COUNT fields.

    Blank trailing cells (a trailing comma) are dropped. Anything else is
    replaced by a marker row so the line keeps its position and is reported
    as a row error.
    """
    if all(_is_blank(f) for f in fields[COLUMN_COUNT:]):
        return list(fields[:COLUMN_COUNT])
    return [f"{_OVERFLOW_MARKER}{len(fields)}"] + [""] * (COLUMN_COUNT - 1)


def _read_frame(data: bytes) -> pd.DataFrame:
    if not data:
        raise ValidationError("Attendance file is empty")
    try:
        if data[:4] == _XLSX_MAGIC:
            return pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, dtype=object, engine="openpyxl")
        return pd.read_csv(
            io.BytesIO(data),
            header=None,
            names=list(range(COLUMN_COUNT)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            engine="python",
            on_bad_lines=_fit_wide_line,
        )
    except (ValueError, UnicodeDecodeError, zipfile.BadZipFile, pd.errors.ParserError) as exc:
        raise ValidationError(f"Unable to read attendance file: {exc}")


def parse_attendance_sheet(data: bytes) -> ParsedSheet:
    frame = _read_frame(data)

    rows: list[ImportRow] = []
    errors: list[str] = []

    for index, values in enumerate(frame.itertuples(index=False, name=None)):
        row_number = index + 1
        if row_number == 1:
            continue  # header

        cells = list(values)[:COLUMN_COUNT]
        cells += [None] * (COLUMN_COUNT - len(cells))
        code_cell, date_cell, in_cell, out_cell, status_cell, shift_cell = cells

        if all(_is_blank(c) for c in cells):
            continue

        if isinstance(code_cell, str) and code_cell.startswith(_OVERFLOW_MARKER):
            seen = code_cell[len(_OVERFLOW_MARKER):]
            errors.append(f"Row {row_number}: Too many columns (expected at most {COLUMN_COUNT}, got {seen})")
            continue

        employee_code = _as_text(code_cell)
        if not employee_code or _is_blank(date_cell):
            errors.append(f"Row {row_number}: Missing employee code or date")
            continue

        try:
            work_date = parse_sheet_date(date_cell)
        except (ValueError, OverflowError):
            errors.append(f"Row {row_number}: Invalid date format: {date_cell}")
            continue

        try:
            check_in_t = parse_sheet_time(in_cell)
        except ValueError:
            errors.append(f"Row {row_number}: Invalid check-in time format: {in_cell}")
            continue
        try:
            check_out_t = parse_sheet_time(out_cell)
        except ValueError:
            errors.append(f"Row {row_number}: Invalid check-out time format: {out_cell}")
            continue

        check_in = datetime.combine(work_date, check_in_t) if check_in_t else None
        check_out = datetime.combine(work_date, check_out_t) if check_out_t else None
        if check_in and check_out and check_out < check_in:
            # Overnight row: the check-out belongs to the next calendar day.
            check_out += timedelta(days=1)

        status_text = (_as_text(status_cell) or "").upper()
        if status_text in _VALID_STATUSES:
            status = AttendanceStatus(status_text)
        else:
            status = AttendanceStatus.PRESENT if check_in else AttendanceStatus.ABSENT

        rows.append(
            ImportRow(
                row_number=row_number,
                employee_code=employee_code,
                work_date=work_date,
                check_in_time=check_in,
                check_out_time=check_out,
                status=status,
                shift_name=_as_text(shift_cell),
            )
        )

    return ParsedSheet(rows=rows, errors=errors)
