from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class BreakTier:
    """Deduct ``break_minutes`` once the raw stay reaches ``min_minutes``."""

    min_minutes: int
    break_minutes: int


@dataclass(frozen=True)
class NightWindow:
    start: time = time(22, 0)
    end: time = time(6, 0)

    @property
    def wraps_midnight(self) -> bool:
        return self.end <= self.start


@dataclass(frozen=True)
class RuleConfiguration:
    """Pay/working-time policy effective for a date range.

    ``break_tiers`` defaults to half the lunch break from 4h and the full
    lunch break from 8h.
    """

    effective_from: date
    effective_to: Optional[date] = None
    lunch_break_minutes: int = 60
    break_tiers: Optional[tuple[BreakTier, ...]] = None
    night_window: NightWindow = field(default_factory=NightWindow)
    overtime_threshold_hours: Decimal = Decimal("8")
    flexible_threshold_hours: Decimal = Decimal("12")
    overtime_rate: Decimal = Decimal("1.5")
    night_rate: Decimal = Decimal("1.5")
    weekly_baseline_hours: Decimal = Decimal("40")
    monthly_standard_hours: Decimal = Decimal("209")

    saturday_base_rate: Decimal = Decimal("1.0")
    saturday_extra_rate: Decimal = Decimal("1.5")
    holiday_base_rate: Decimal = Decimal("1.5")
    holiday_extra_rate: Decimal = Decimal("2.0")
    night_accrual_bonus: Decimal = Decimal("0.5")

    scheduled_start: Optional[time] = None
    scheduled_end: Optional[time] = None
    late_grace_minutes: int = 0
    rule_id: Optional[int] = None

    def effective_break_tiers(self) -> tuple[BreakTier, ...]:
        if self.break_tiers is not None:
            return tuple(sorted(self.break_tiers, key=lambda t: t.min_minutes))
        return (
            BreakTier(min_minutes=4 * 60, break_minutes=self.lunch_break_minutes // 2),
            BreakTier(min_minutes=8 * 60, break_minutes=self.lunch_break_minutes),
        )

    def covers(self, day: date) -> bool:
        if day < self.effective_from:
            return False
        return self.effective_to is None or day <= self.effective_to
