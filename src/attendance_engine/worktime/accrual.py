from __future__ import annotations

from decimal import Decimal

from ..common.datetime_utils import quantize_hours
from ..core.constants import ACCRUAL_BASE_HOURS, MINUTES_PER_HOUR
from ..core.enums import DayType
from ..rules.model import RuleConfiguration

ZERO = Decimal("0")


def accrual_hours(
    net_minutes: int,
    night_hours: Decimal,
    day_type: DayType,
    rules: RuleConfiguration,
) -> tuple[Decimal, Decimal]:
    """Leave credit for weekend/holiday work as ``(substitute, compensatory)``.

    Saturday work earns substitute leave, Sunday/holiday work compensatory leave.
    The first 8 hours accrue at the base rate, the rest at the extra rate, and
    night hours add a flat bonus on top.
    """
    if day_type == DayType.WEEKDAY or net_minutes <= 0:
        return ZERO, ZERO

    if day_type == DayType.SATURDAY:
        base_rate, extra_rate = rules.saturday_base_rate, rules.saturday_extra_rate
    else:
        base_rate, extra_rate = rules.holiday_base_rate, rules.holiday_extra_rate

    base_cap = ACCRUAL_BASE_HOURS * MINUTES_PER_HOUR
    base_minutes = min(net_minutes, base_cap)
    extra_minutes = max(0, net_minutes - base_cap)

    credit = (
        Decimal(base_minutes) * base_rate / MINUTES_PER_HOUR
        + Decimal(extra_minutes) * extra_rate / MINUTES_PER_HOUR
        + night_hours * rules.night_accrual_bonus
    )
    credit = quantize_hours(credit)

    if day_type == DayType.SATURDAY:
        return credit, ZERO
    return ZERO, credit
