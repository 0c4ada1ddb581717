from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol

from ..core.enums import LeaveKind
from .model import LeaveCounters


class LeaveRepository(Protocol):
    def get_counters(self, employee_id: int) -> LeaveCounters:
        raise NotImplementedError

    def add_granted_days(self, employee_id: int, kind: LeaveKind, days: Decimal) -> None:
        raise NotImplementedError

    def use_days_if_available(self, employee_id: int, kind: LeaveKind, days: Decimal) -> bool:
        """Atomically consume annual/sick days; False when not enough remain."""

        raise NotImplementedError

    def get_day_credit(self, employee_id: int, work_date: date) -> tuple[Decimal, Decimal]:
        """(substitute, compensatory) hours credited for one work-date."""

        raise NotImplementedError

    def replace_day_credit(
        self,
        employee_id: int,
        work_date: date,
        *,
        substitute_hours: Decimal,
        compensatory_hours: Decimal,
    ) -> None:
        raise NotImplementedError

    def credited_hours(self, employee_id: int, kind: LeaveKind) -> Decimal:
        raise NotImplementedError

    def debited_hours(self, employee_id: int, kind: LeaveKind) -> Decimal:
        raise NotImplementedError

    def debit_hours_if_available(self, employee_id: int, kind: LeaveKind, hours: Decimal) -> bool:
        """Atomically record an hourly debit; False when credit minus debits is short."""

        raise NotImplementedError
