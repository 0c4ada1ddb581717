from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_hours
from ..core.enums import PeriodStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class SettlementPeriod:
    period_id: int
    name: str
    start_date: date
    end_date: date
    status: PeriodStatus = PeriodStatus.PLANNED
    settlement_completed: bool = False

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "period_id": self.period_id,
            "name": self.name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status.value,
            "settlement_completed": self.settlement_completed,
        }


@dataclass(frozen=True)
class QuarterlySettlement:
    """One employee's row of a settled flexible-work period.

    The overtime allowance and the night allowance already paid are kept side
    by side; ``net_overtime_allowance`` is not reduced by the night figure.
    """

    period_id: int
    employee_id: int
    employee_name: str
    total_work_hours: Decimal
    weekly_avg_hours: Decimal
    total_night_hours: Decimal
    overtime_allowance_amount: Decimal
    night_allowance_already_paid: Decimal
    net_overtime_allowance: Decimal
    weeks_in_period: Decimal = ZERO
    excess_hours: Decimal = ZERO
    work_days: int = 0
    department: Optional[str] = None
    position: Optional[str] = None
    monthly_work_hours: tuple[tuple[date, Decimal], ...] = field(default=())

    def to_dict(self) -> dict:
        return {
            "period_id": self.period_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "department": self.department or "",
            "position": self.position or "",
            "work_days": self.work_days,
            "total_work_hours": format_hours(self.total_work_hours),
            "weeks_in_period": format_hours(self.weeks_in_period),
            "weekly_avg_hours": format_hours(self.weekly_avg_hours),
            "excess_hours": format_hours(self.excess_hours),
            "total_night_hours": format_hours(self.total_night_hours),
            "overtime_allowance_amount": str(self.overtime_allowance_amount),
            "night_allowance_already_paid": str(self.night_allowance_already_paid),
            "net_overtime_allowance": str(self.net_overtime_allowance),
        }


@dataclass(frozen=True)
class SettlementSummary:
    employee_count: int
    total_overtime_allowance: Decimal
    employees_with_overtime: int
    avg_weekly_hours: Decimal
    total_night_hours: Decimal
    night_allowance_already_paid: Decimal

    def to_dict(self) -> dict:
        return {
            "employee_count": self.employee_count,
            "total_overtime_allowance": str(self.total_overtime_allowance),
            "employees_with_overtime": self.employees_with_overtime,
            "avg_weekly_hours": format_hours(self.avg_weekly_hours),
            "total_night_hours": format_hours(self.total_night_hours),
            "night_allowance_already_paid": str(self.night_allowance_already_paid),
        }


@dataclass(frozen=True)
class SettlementRun:
    period: SettlementPeriod
    settlements: list[QuarterlySettlement]
    csv_export: str
