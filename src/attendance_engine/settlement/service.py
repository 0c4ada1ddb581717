from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Sequence

from ..common.datetime_utils import iter_months, period_end_bounds, quantize_hours, quantize_money
from ..common.validators import require_non_empty
from ..core.constants import MAX_SETTLEMENT_MONTHS, MIN_SETTLEMENT_MONTHS
from ..core.enums import PeriodStatus
from ..core.exceptions import SettlementConflictError, ValidationError
from ..employees.service import EmployeeDirectory
from ..payroll.rates import hourly_rate
from ..payroll.repository import NightPayRepository
from ..rules.service import RuleService
from ..worktime.model import DailyWorkSummary
from ..worktime.repository import WorkSummaryRepository
from .export import settlements_to_csv
from .model import QuarterlySettlement, SettlementPeriod, SettlementRun, SettlementSummary
from .repository import SettlementRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

_TRANSITIONS: dict[PeriodStatus, set[PeriodStatus]] = {
    PeriodStatus.PLANNED: {PeriodStatus.ACTIVE, PeriodStatus.CANCELLED},
    PeriodStatus.ACTIVE: {PeriodStatus.COMPLETED},
    PeriodStatus.COMPLETED: set(),
    PeriodStatus.CANCELLED: set(),
}

_SETTLEABLE = {PeriodStatus.ACTIVE, PeriodStatus.COMPLETED}


class SettlementService:
    """Flexible-work periods and their one-time overtime settlement."""

    def __init__(
        self,
        settlements: SettlementRepository,
        summaries: WorkSummaryRepository,
        directory: EmployeeDirectory,
        rules: RuleService,
        night_pay: NightPayRepository,
    ):
        self._settlements = settlements
        self._summaries = summaries
        self._directory = directory
        self._rules = rules
        self._night_pay = night_pay

    # Periods
    def create_period(self, name: str, start_date: date, end_date: date) -> SettlementPeriod:
        name = require_non_empty(name, "name")
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        earliest_end, latest_end = period_end_bounds(start_date, MIN_SETTLEMENT_MONTHS, MAX_SETTLEMENT_MONTHS)
        if not earliest_end <= end_date <= latest_end:
            raise ValidationError(
                f"a settlement period must last {MIN_SETTLEMENT_MONTHS}-{MAX_SETTLEMENT_MONTHS} whole months: "
                f"end between {earliest_end.isoformat()} and {latest_end.isoformat()}"
            )
        period = self._settlements.create_period(name=name, start_date=start_date, end_date=end_date)
        logger.info("settlement period %s created: %s..%s", period.period_id, start_date, end_date)
        return period

    def get_period(self, period_id: int) -> SettlementPeriod:
        period = self._settlements.get_period(period_id)
        if period is None:
            raise ValidationError(f"settlement period {period_id} does not exist")
        return period

    def list_periods(self) -> Sequence[SettlementPeriod]:
        return self._settlements.list_periods()

    def transition(self, period_id: int, target: PeriodStatus) -> SettlementPeriod:
        period = self.get_period(period_id)
        if target not in _TRANSITIONS[period.status]:
            raise ValidationError(f"cannot move period from {period.status.value} to {target.value}")
        if not self._settlements.update_status(period_id, expected=period.status, new=target):
            raise ValidationError(f"period {period_id} changed concurrently; reload and retry")
        return self.get_period(period_id)

    def activate(self, period_id: int) -> SettlementPeriod:
        return self.transition(period_id, PeriodStatus.ACTIVE)

    def complete(self, period_id: int) -> SettlementPeriod:
        return self.transition(period_id, PeriodStatus.COMPLETED)

    def cancel(self, period_id: int) -> SettlementPeriod:
        return self.transition(period_id, PeriodStatus.CANCELLED)

    # Settlement
    def run_quarterly_settlement(self, period_id: int) -> SettlementRun:
        period = self.get_period(period_id)
        if period.status not in _SETTLEABLE:
            raise ValidationError(f"period {period_id} is {period.status.value}; only active or completed periods settle")
        if period.settlement_completed:
            raise SettlementConflictError(f"period {period_id} has already been settled")

        settlements = self.calculate(period)
        self._settlements.complete_with_settlements(period.period_id, settlements)

        logger.info(
            "settlement period=%s employees=%d total_allowance=%s",
            period.period_id, len(settlements), sum((s.overtime_allowance_amount for s in settlements), ZERO),
        )
        return SettlementRun(
            period=self.get_period(period_id),
            settlements=settlements,
            csv_export=settlements_to_csv(settlements),
        )

    def calculate(self, period: SettlementPeriod) -> list[QuarterlySettlement]:
        """Compute the rows without persisting anything."""
        config = self._rules.effective_for(period.end_date)
        weeks = Decimal(period.days) / 7
        baseline_total = config.weekly_baseline_hours * weeks

        by_employee: dict[int, list[DailyWorkSummary]] = defaultdict(list)
        for summary in self._summaries.list_between(start_date=period.start_date, end_date=period.end_date):
            by_employee[summary.employee_id].append(summary)

        months = list(iter_months(period.start_date, period.end_date))
        rows: list[QuarterlySettlement] = []
        for employee_id, summaries in by_employee.items():
            employee = self._directory.get(employee_id)
            total = sum((s.total_hours for s in summaries), ZERO)
            excess = max(total - baseline_total, ZERO)
            rate = hourly_rate(employee.annual_salary if employee else ZERO, config.monthly_standard_hours)
            amount = quantize_money(excess * rate * config.overtime_rate)

            per_month: dict[date, Decimal] = {m: ZERO for m in months}
            for s in summaries:
                per_month[s.work_date.replace(day=1)] += s.total_hours

            rows.append(
                QuarterlySettlement(
                    period_id=period.period_id,
                    employee_id=employee_id,
                    employee_name=employee.display_name if employee else str(employee_id),
                    department=employee.department if employee else None,
                    position=employee.position if employee else None,
                    work_days=sum(1 for s in summaries if s.total_hours > 0),
                    total_work_hours=total,
                    weeks_in_period=quantize_hours(weeks),
                    weekly_avg_hours=quantize_hours(total / weeks),
                    excess_hours=quantize_hours(excess),
                    total_night_hours=sum((s.night_hours for s in summaries), ZERO),
                    overtime_allowance_amount=amount,
                    night_allowance_already_paid=self._night_allowance_paid(employee_id, months),
                    net_overtime_allowance=amount,
                    monthly_work_hours=tuple(sorted(per_month.items())),
                )
            )

        rows.sort(key=lambda r: (r.employee_name, r.employee_id))
        return rows

    def _night_allowance_paid(self, employee_id: int, months: list[date]) -> Decimal:
        paid = self._night_pay.list_for_employee(employee_id, start_month=months[0], end_month=months[-1])
        return sum((p.allowance_amount for p in paid), ZERO)

    def list_settlements(self, period_id: int) -> Sequence[QuarterlySettlement]:
        self.get_period(period_id)
        return self._settlements.list_settlements(period_id)

    def summarize(self, settlements: Sequence[QuarterlySettlement]) -> SettlementSummary:
        count = len(settlements)
        avg_weekly = sum((s.weekly_avg_hours for s in settlements), ZERO) / count if count else ZERO
        return SettlementSummary(
            employee_count=count,
            total_overtime_allowance=sum((s.overtime_allowance_amount for s in settlements), ZERO),
            employees_with_overtime=sum(1 for s in settlements if s.excess_hours > 0),
            avg_weekly_hours=quantize_hours(avg_weekly),
            total_night_hours=sum((s.total_night_hours for s in settlements), ZERO),
            night_allowance_already_paid=sum((s.night_allowance_already_paid for s in settlements), ZERO),
        )
