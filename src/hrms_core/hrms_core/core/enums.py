from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Per-day attendance classification stored in attendance_records."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    HALF_DAY = "HALF_DAY"
    LEAVE = "LEAVE"
    HOLIDAY = "HOLIDAY"


class EventSource(str, Enum):
    """Where a raw punch came from."""

    BIOMETRIC = "BIOMETRIC"
    MOBILE = "MOBILE"
    WEB = "WEB"
    MANUAL = "MANUAL"
    IMPORT = "IMPORT"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"
    RESIGNED = "resigned"


class PaymentStatus(str, Enum):
    """Payroll payment lifecycle: pending -> processed -> paid."""

    PENDING = "pending"
    PROCESSED = "processed"
    PAID = "paid"


class ErrorKind(str, Enum):
    """Category of a per-item failure reported by batch operations."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    COMPUTATION = "computation"
    ERROR = "error"
