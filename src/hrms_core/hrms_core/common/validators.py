from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def _require_int(value, field_name: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number, got {value!r}")
    if not number.is_integer():
        raise ValidationError(f"{field_name} must be a whole number, got {value!r}")
    return int(number)


def require_month(month: int) -> int:
    value = _require_int(month, "month")
    if not 1 <= value <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month!r}")
    return value


def require_year(year: int) -> int:
    value = _require_int(year, "year")
    if not 1900 <= value <= 9999:
        raise ValidationError(f"year is not valid: {year!r}")
    return value


def require_coordinates(latitude: Optional[float], longitude: Optional[float]) -> tuple[float, float]:
    # 0.0 is a valid coordinate, only a missing value is rejected.
    if latitude is None or longitude is None:
        raise ValidationError("Latitude and longitude are required")
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("Latitude and longitude must be numbers")
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise ValidationError(f"Longitude out of range: {lon}")
    return lat, lon
