from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal

from ..common.datetime_utils import month_bounds, quantize_money
from ..employees.service import EmployeeDirectory
from ..rules.service import RuleService
from ..worktime.repository import WorkSummaryRepository
from .model import MonthlyNightPay
from .rates import hourly_rate
from .repository import NightPayRepository

logger = logging.getLogger(__name__)


class NightPayService:
    def __init__(
        self,
        summaries: WorkSummaryRepository,
        directory: EmployeeDirectory,
        rules: RuleService,
        night_pay: NightPayRepository,
    ):
        self._summaries = summaries
        self._directory = directory
        self._rules = rules
        self._night_pay = night_pay

    def calculate_month(self, year: int, month: int) -> list[MonthlyNightPay]:
        start, end = month_bounds(year, month)
        config = self._rules.effective_for(end)

        night_hours: dict[int, Decimal] = defaultdict(Decimal)
        for summary in self._summaries.list_between(start_date=start, end_date=end):
            night_hours[summary.employee_id] += summary.night_hours

        rows: list[MonthlyNightPay] = []
        for employee_id, hours in sorted(night_hours.items()):
            if hours <= 0:
                continue
            employee = self._directory.get(employee_id)
            rate = hourly_rate(employee.annual_salary if employee else Decimal("0"), config.monthly_standard_hours)
            rows.append(
                MonthlyNightPay(
                    employee_id=employee_id,
                    pay_month=start,
                    night_hours=hours,
                    hourly_rate=rate,
                    night_rate=config.night_rate,
                    allowance_amount=quantize_money(hours * rate * config.night_rate),
                )
            )
        return rows

    def record_month(self, year: int, month: int) -> list[MonthlyNightPay]:
        rows = self.calculate_month(year, month)
        self._night_pay.upsert_many(rows)
        logger.info("night pay %04d-%02d recorded for %d employees", year, month, len(rows))
        return rows
