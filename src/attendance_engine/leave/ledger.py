from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from ..core.constants import HOURS_PER_LEAVE_DAY, LEAVE_UNIT_HOURS
from ..core.enums import LeaveKind
from ..core.exceptions import ValidationError
from .model import DebitResult, LeaveBalance
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

HOURLY_KINDS = (LeaveKind.SUBSTITUTE, LeaveKind.COMPENSATORY)
DAILY_KINDS = (LeaveKind.ANNUAL, LeaveKind.SICK)


def hours_to_days(hours: Decimal) -> Decimal:
    if hours <= 0:
        return Decimal("0")
    return Decimal(hours) / HOURS_PER_LEAVE_DAY


def days_to_hours(days: Decimal) -> Decimal:
    return Decimal(days) * HOURS_PER_LEAVE_DAY


def is_leave_unit(hours: Decimal) -> bool:
    """Leave is taken in half-day (4h) steps."""
    return hours > 0 and hours % LEAVE_UNIT_HOURS == 0


class LeaveLedger:
    def __init__(self, leave: LeaveRepository):
        self._leave = leave

    def get_balance(self, employee_id: int) -> LeaveBalance:
        counters = self._leave.get_counters(employee_id)
        return LeaveBalance(
            employee_id=employee_id,
            annual_days=counters.annual_days,
            used_annual_days=counters.used_annual_days,
            sick_days=counters.sick_days,
            used_sick_days=counters.used_sick_days,
            substitute_leave_hours=self._available_hours(employee_id, LeaveKind.SUBSTITUTE),
            compensatory_leave_hours=self._available_hours(employee_id, LeaveKind.COMPENSATORY),
        )

    def _available_hours(self, employee_id: int, kind: LeaveKind) -> Decimal:
        return self._leave.credited_hours(employee_id, kind) - self._leave.debited_hours(employee_id, kind)

    def replace_day_credit(
        self,
        employee_id: int,
        work_date: date,
        *,
        substitute_hours: Decimal,
        compensatory_hours: Decimal,
    ) -> None:
        """Overwrite one day's accrual; recomputing a day never stacks credit."""
        old_substitute, old_compensatory = self._leave.get_day_credit(employee_id, work_date)
        if (old_substitute, old_compensatory) == (substitute_hours, compensatory_hours):
            return

        for kind, old, new in (
            (LeaveKind.SUBSTITUTE, old_substitute, substitute_hours),
            (LeaveKind.COMPENSATORY, old_compensatory, compensatory_hours),
        ):
            if self._available_hours(employee_id, kind) - old + new < 0:
                raise ValidationError(
                    f"{kind.value} credit for {work_date.isoformat()} is already used; cannot lower it to {new}h"
                )

        self._leave.replace_day_credit(
            employee_id,
            work_date,
            substitute_hours=substitute_hours,
            compensatory_hours=compensatory_hours,
        )
        logger.debug(
            "leave credit employee=%s date=%s substitute=%s compensatory=%s",
            employee_id, work_date, substitute_hours, compensatory_hours,
        )

    def grant_days(self, employee_id: int, kind: LeaveKind, days: Decimal) -> LeaveBalance:
        if kind not in DAILY_KINDS:
            raise ValidationError("only annual and sick leave are granted in days")
        if days <= 0:
            raise ValidationError("granted days must be positive")
        self._leave.add_granted_days(employee_id, kind, Decimal(days))
        return self.get_balance(employee_id)

    def debit_leave(self, employee_id: int, kind: LeaveKind, hours: Decimal) -> DebitResult:
        hours = Decimal(hours)
        if not is_leave_unit(hours):
            return DebitResult.rejected("leave must be taken in 0.5 or 1.0 day units (4h steps)")

        if kind in HOURLY_KINDS:
            available = self._available_hours(employee_id, kind)
            if hours > available or not self._leave.debit_hours_if_available(employee_id, kind, hours):
                return DebitResult.rejected(f"insufficient {kind.value} balance: requested {hours}h, available {available}h")
        else:
            days = hours_to_days(hours)
            if not self._leave.use_days_if_available(employee_id, kind, days):
                return DebitResult.rejected(f"insufficient {kind.value} balance for {days} day(s)")

        logger.info("leave debit employee=%s kind=%s hours=%s", employee_id, kind.value, hours)
        return DebitResult.accepted(self.get_balance(employee_id))
