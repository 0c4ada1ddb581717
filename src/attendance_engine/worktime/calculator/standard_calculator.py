from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from ...attendance.factory import StatusStrategyFactory
from ...attendance.model import DailyAttendance
from ...common.datetime_utils import minutes_to_hours, seconds_to_hours
from ...core.constants import MINUTES_PER_HOUR
from ...core.enums import DayType
from ...core.exceptions import AmbiguousEventError
from ...rules.model import RuleConfiguration
from ..accrual import accrual_hours
from ..breaks import break_minutes
from ..dinner import dinner_missing
from ..model import DailyWorkSummary
from ..night import night_overlap_seconds
from .base import WorkTimeCalculator


class StandardWorkTimeCalculator(WorkTimeCalculator):
    """Standard rule: (out - in) - tiered breaks, split at the overtime threshold."""

    def __init__(self, strategy_factory: StatusStrategyFactory | None = None):
        self._factory = strategy_factory or StatusStrategyFactory()

    def compute(
        self,
        *,
        employee_id: int,
        work_date: date,
        attendance: Optional[DailyAttendance],
        rules: RuleConfiguration,
        day_type: DayType,
        overtime_threshold_hours: Decimal,
    ) -> DailyWorkSummary:
        if attendance is None or not attendance.events:
            return self._without_hours(employee_id, work_date, attendance, rules)
        try:
            check_in, check_out = attendance.require_pair()
        except AmbiguousEventError:
            return self._without_hours(employee_id, work_date, attendance, rules)

        raw_minutes = int((check_out - check_in).total_seconds() // 60)
        deducted = break_minutes(raw_minutes, rules, had_dinner=attendance.had_dinner)
        net_minutes = max(raw_minutes - deducted, 0)

        if net_minutes <= 0:
            return self._without_hours(employee_id, work_date, attendance, rules, break_total=deducted)

        decision = self._factory.for_day(attendance=attendance, rules=rules, net_minutes=net_minutes).decide(
            attendance=attendance, rules=rules
        )

        threshold_minutes = int(overtime_threshold_hours * MINUTES_PER_HOUR)
        night_hours = seconds_to_hours(night_overlap_seconds(check_in, check_out, rules.night_window))
        substitute, compensatory = accrual_hours(net_minutes, night_hours, day_type, rules)

        return DailyWorkSummary(
            employee_id=employee_id,
            work_date=work_date,
            status=decision.status,
            basic_hours=minutes_to_hours(min(net_minutes, threshold_minutes)),
            overtime_hours=minutes_to_hours(max(net_minutes - threshold_minutes, 0)),
            night_hours=night_hours,
            break_minutes=deducted,
            substitute_hours_earned=substitute,
            compensatory_hours_earned=compensatory,
            had_dinner=attendance.had_dinner,
            dinner_missing=dinner_missing(check_in, check_out, net_minutes, had_dinner=attendance.had_dinner),
            note=decision.note or attendance.review_note,
        )

    def _without_hours(
        self,
        employee_id: int,
        work_date: date,
        attendance: Optional[DailyAttendance],
        rules: RuleConfiguration,
        *,
        break_total: int = 0,
    ) -> DailyWorkSummary:
        decision = self._factory.for_day(attendance=attendance, rules=rules, net_minutes=0).decide(
            attendance=attendance, rules=rules
        )
        return DailyWorkSummary(
            employee_id=employee_id,
            work_date=work_date,
            status=decision.status,
            break_minutes=break_total,
            had_dinner=bool(attendance and attendance.had_dinner),
            note=decision.note,
        )
