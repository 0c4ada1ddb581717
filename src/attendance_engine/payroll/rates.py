from __future__ import annotations

from decimal import Decimal

from ..common.datetime_utils import quantize_money


def hourly_rate(annual_salary: Decimal, monthly_standard_hours: Decimal) -> Decimal:
    """Ordinary hourly wage: annual salary / 12 / monthly standard hours."""
    if not monthly_standard_hours or annual_salary <= 0:
        return Decimal("0")
    return quantize_money(Decimal(annual_salary) / 12 / Decimal(monthly_standard_hours))
