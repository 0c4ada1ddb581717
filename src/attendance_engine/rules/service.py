from __future__ import annotations

from datetime import date
from decimal import Decimal

from ..core.enums import DayType
from ..core.exceptions import ConfigurationMissingError
from .model import RuleConfiguration
from .repository import FlexiblePeriodLookup, HolidayRepository, RuleConfigurationRepository


class RuleService:
    """Date-effective rule lookups.

    Looked up on every computation; policy periods change, so nothing is cached.
    """

    def __init__(
        self,
        rules: RuleConfigurationRepository,
        holidays: HolidayRepository,
        flexible_periods: FlexiblePeriodLookup | None = None,
    ):
        self._rules = rules
        self._holidays = holidays
        self._flexible = flexible_periods

    def effective_for(self, day: date) -> RuleConfiguration:
        config = self._rules.get_effective(day)
        if config is None:
            raise ConfigurationMissingError(f"no rule configuration effective on {day.isoformat()}")
        return config

    def day_type(self, day: date) -> DayType:
        if day.weekday() == 6 or self._holidays.is_holiday(day):
            return DayType.SUNDAY_OR_HOLIDAY
        if day.weekday() == 5:
            return DayType.SATURDAY
        return DayType.WEEKDAY

    def overtime_threshold_hours(self, day: date, config: RuleConfiguration) -> Decimal:
        if self._flexible and self._flexible.has_active_period_covering(day):
            return config.flexible_threshold_hours
        return config.overtime_threshold_hours
