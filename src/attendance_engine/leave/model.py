from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_hours

ZERO = Decimal("0")


@dataclass(frozen=True)
class LeaveCounters:
    annual_days: Decimal = ZERO
    used_annual_days: Decimal = ZERO
    sick_days: Decimal = ZERO
    used_sick_days: Decimal = ZERO


@dataclass(frozen=True)
class LeaveBalance:
    """Running counters for one employee.

    ``substitute_leave_hours`` and ``compensatory_leave_hours`` are what is
    still available (credited minus taken).
    """

    employee_id: int
    annual_days: Decimal
    used_annual_days: Decimal
    sick_days: Decimal
    used_sick_days: Decimal
    substitute_leave_hours: Decimal
    compensatory_leave_hours: Decimal

    @property
    def remaining_annual_days(self) -> Decimal:
        return self.annual_days - self.used_annual_days

    @property
    def remaining_sick_days(self) -> Decimal:
        return self.sick_days - self.used_sick_days

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "annual_days": format_hours(self.annual_days),
            "used_annual_days": format_hours(self.used_annual_days),
            "sick_days": format_hours(self.sick_days),
            "used_sick_days": format_hours(self.used_sick_days),
            "substitute_leave_hours": format_hours(self.substitute_leave_hours),
            "compensatory_leave_hours": format_hours(self.compensatory_leave_hours),
        }


@dataclass(frozen=True)
class DebitResult:
    """Outcome of a leave debit; a rejection is an expected business result."""

    ok: bool
    reason: Optional[str] = None
    balance: Optional[LeaveBalance] = None

    @classmethod
    def accepted(cls, balance: LeaveBalance) -> "DebitResult":
        return cls(ok=True, balance=balance)

    @classmethod
    def rejected(cls, reason: str) -> "DebitResult":
        return cls(ok=False, reason=reason)
