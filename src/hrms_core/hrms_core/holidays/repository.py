from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_between(self, organization_id: int, *, start: date, end: date) -> Sequence[Holiday]:
        """Holidays with ``start <= holiday_date <= end``."""

        raise NotImplementedError
