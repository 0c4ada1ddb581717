from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..rules.model import RuleConfiguration
from .model import DailyAttendance
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import StatusStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.time_error_strategy import TimeErrorStrategy


@dataclass
class StatusStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_day(
        self,
        *,
        attendance: Optional[DailyAttendance],
        rules: RuleConfiguration,
        net_minutes: int,
    ) -> StatusStrategy:
        if attendance is None or not attendance.events:
            return AbsentStrategy()
        if attendance.check_in is None or attendance.check_out is None:
            return TimeErrorStrategy()
        if net_minutes <= 0:
            return TimeErrorStrategy("no working time left after breaks")

        if rules.scheduled_start:
            shift_start = datetime.combine(attendance.work_date, rules.scheduled_start)
            if attendance.check_in > shift_start + timedelta(minutes=rules.late_grace_minutes):
                return LateStrategy()

        if rules.scheduled_end:
            shift_end = datetime.combine(attendance.work_date, rules.scheduled_end)
            if rules.scheduled_start and rules.scheduled_end <= rules.scheduled_start:
                shift_end += timedelta(days=1)
            if attendance.check_out < shift_end:
                return EarlyLeaveStrategy()

        return NormalStrategy()
