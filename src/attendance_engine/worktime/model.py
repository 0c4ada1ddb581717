from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..common.datetime_utils import format_hours
from ..core.enums import WorkStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class DailyWorkSummary:
    """Derived from DailyAttendance; recomputed, never hand-edited."""

    employee_id: int
    work_date: date
    status: WorkStatus
    basic_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    night_hours: Decimal = ZERO
    break_minutes: int = 0
    substitute_hours_earned: Decimal = ZERO
    compensatory_hours_earned: Decimal = ZERO
    had_dinner: bool = False
    dinner_missing: bool = False
    note: Optional[str] = None

    @property
    def total_hours(self) -> Decimal:
        return self.basic_hours + self.overtime_hours

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "work_date": self.work_date.isoformat(),
            "status": self.status.value,
            "basic_hours": format_hours(self.basic_hours),
            "overtime_hours": format_hours(self.overtime_hours),
            "night_hours": format_hours(self.night_hours),
            "break_minutes": self.break_minutes,
            "substitute_hours_earned": format_hours(self.substitute_hours_earned),
            "compensatory_hours_earned": format_hours(self.compensatory_hours_earned),
            "had_dinner": self.had_dinner,
            "dinner_missing": self.dinner_missing,
            "note": self.note or "",
        }


@dataclass(frozen=True)
class MonthlyWorkStats:
    employee_id: int
    year: int
    month: int
    work_days: int
    basic_hours: Decimal
    overtime_hours: Decimal
    night_hours: Decimal
    substitute_hours: Decimal
    compensatory_hours: Decimal

    @property
    def total_hours(self) -> Decimal:
        return self.basic_hours + self.overtime_hours

    @classmethod
    def from_summaries(cls, employee_id: int, year: int, month: int, rows: Iterable[DailyWorkSummary]) -> "MonthlyWorkStats":
        rows = [r for r in rows if r.employee_id == employee_id and (r.work_date.year, r.work_date.month) == (year, month)]
        return cls(
            employee_id=employee_id,
            year=year,
            month=month,
            work_days=sum(1 for r in rows if r.total_hours > 0),
            basic_hours=sum((r.basic_hours for r in rows), ZERO),
            overtime_hours=sum((r.overtime_hours for r in rows), ZERO),
            night_hours=sum((r.night_hours for r in rows), ZERO),
            substitute_hours=sum((r.substitute_hours_earned for r in rows), ZERO),
            compensatory_hours=sum((r.compensatory_hours_earned for r in rows), ZERO),
        )

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "month": f"{self.year:04d}-{self.month:02d}",
            "work_days": self.work_days,
            "basic_hours": format_hours(self.basic_hours),
            "overtime_hours": format_hours(self.overtime_hours),
            "night_hours": format_hours(self.night_hours),
            "substitute_hours": format_hours(self.substitute_hours),
            "compensatory_hours": format_hours(self.compensatory_hours),
        }
