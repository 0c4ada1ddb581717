from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import MonthlyNightPay


class NightPayRepository(Protocol):
    def upsert_many(self, rows: Sequence[MonthlyNightPay]) -> None:
        """Insert or overwrite rows keyed by (employee_id, pay_month)."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start_month: date, end_month: date) -> Sequence[MonthlyNightPay]:
        """Rows whose ``pay_month`` falls within [start_month, end_month]."""

        raise NotImplementedError
