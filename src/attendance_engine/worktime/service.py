from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.model import DailyAttendance
from ..common.datetime_utils import month_bounds
from ..leave.ledger import LeaveLedger
from ..rules.service import RuleService
from .calculator.base import WorkTimeCalculator
from .calculator.standard_calculator import StandardWorkTimeCalculator
from .model import DailyWorkSummary, MonthlyWorkStats
from .repository import WorkSummaryRepository

logger = logging.getLogger(__name__)


class WorkTimeService:
    def __init__(
        self,
        summaries: WorkSummaryRepository,
        rules: RuleService,
        ledger: LeaveLedger,
        *,
        calculator: Optional[WorkTimeCalculator] = None,
    ):
        self._summaries = summaries
        self._rules = rules
        self._ledger = ledger
        self._calculator = calculator or StandardWorkTimeCalculator()

    def compute_day(self, employee_id: int, work_date: date, attendance: Optional[DailyAttendance]) -> DailyWorkSummary:
        """Compute and persist one day; running it twice on the same input is a no-op."""
        config = self._rules.effective_for(work_date)
        summary = self._calculator.compute(
            employee_id=employee_id,
            work_date=work_date,
            attendance=attendance,
            rules=config,
            day_type=self._rules.day_type(work_date),
            overtime_threshold_hours=self._rules.overtime_threshold_hours(work_date, config),
        )

        self._ledger.replace_day_credit(
            employee_id,
            work_date,
            substitute_hours=summary.substitute_hours_earned,
            compensatory_hours=summary.compensatory_hours_earned,
        )
        self._summaries.upsert(summary)
        logger.debug(
            "summary employee=%s date=%s status=%s basic=%s overtime=%s night=%s",
            employee_id, work_date, summary.status.value,
            summary.basic_hours, summary.overtime_hours, summary.night_hours,
        )
        return summary

    def get_summary(self, employee_id: int, work_date: date) -> Optional[DailyWorkSummary]:
        return self._summaries.get(employee_id, work_date)

    def monthly_stats(self, employee_id: int, year: int, month: int) -> MonthlyWorkStats:
        start, end = month_bounds(year, month)
        rows = self._summaries.list_between(start_date=start, end_date=end, employee_id=employee_id)
        return MonthlyWorkStats.from_summaries(employee_id, year, month, rows)
