from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import RuleConfiguration


class RuleConfigurationRepository(Protocol):
    def get_effective(self, on: date) -> Optional[RuleConfiguration]:
        """Latest configuration whose range covers ``on``."""

        raise NotImplementedError


class HolidayRepository(Protocol):
    def is_holiday(self, day: date) -> bool:
        raise NotImplementedError


class FlexiblePeriodLookup(Protocol):
    def has_active_period_covering(self, day: date) -> bool:
        """True when an active flexible-work period includes ``day``."""

        raise NotImplementedError
