from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..common.datetime_utils import format_hours


@dataclass(frozen=True)
class MonthlyNightPay:
    """Night allowance paid with one month's salary."""

    employee_id: int
    pay_month: date
    night_hours: Decimal
    hourly_rate: Decimal
    night_rate: Decimal
    allowance_amount: Decimal

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "pay_month": self.pay_month.strftime("%Y-%m"),
            "night_hours": format_hours(self.night_hours),
            "hourly_rate": str(self.hourly_rate),
            "night_rate": str(self.night_rate),
            "allowance_amount": str(self.allowance_amount),
        }
