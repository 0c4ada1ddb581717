from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from attendance_engine.attendance.model import AttendanceEvent, DailyAttendance
from attendance_engine.common.validators import normalize_name
from attendance_engine.container import build_services
from attendance_engine.core.enums import LeaveKind, PeriodStatus, SourceSystem
from attendance_engine.core.exceptions import SettlementConflictError
from attendance_engine.employees.model import Employee
from attendance_engine.leave.model import LeaveCounters
from attendance_engine.rules.model import RuleConfiguration
from attendance_engine.settlement.model import SettlementPeriod

ZERO = Decimal("0")


class InMemoryEmployees:
    def __init__(self, employees: list[Employee]):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def find_by_display_name(self, normalized_name: str):
        return [e for e in self._by_id.values() if normalize_name(e.display_name) == normalized_name]


class InMemoryRules:
    def __init__(self, configs: list[RuleConfiguration]):
        self.configs = list(configs)

    def get_effective(self, on: date) -> Optional[RuleConfiguration]:
        matches = [c for c in self.configs if c.covers(on)]
        return max(matches, key=lambda c: c.effective_from) if matches else None


class InMemoryHolidays:
    def __init__(self, days: set[date] | None = None):
        self.days = set(days or ())

    def is_holiday(self, day: date) -> bool:
        return day in self.days


class InMemoryAttendance:
    def __init__(self):
        self.events: dict[tuple, AttendanceEvent] = {}
        self.daily: dict[tuple[int, date], DailyAttendance] = {}

    def add_events(self, events) -> int:
        inserted = 0
        for e in events:
            key = (e.employee_id, e.timestamp, e.kind)
            if key not in self.events:
                self.events[key] = replace(e, event_id=len(self.events) + 1)
                inserted += 1
        return inserted

    def list_events(self, employee_id: int, work_date: date):
        rows = [e for e in self.events.values() if (e.employee_id, e.work_date) == (employee_id, work_date)]
        return sorted(rows, key=lambda e: e.timestamp)

    def add_web_event(self, event) -> bool:
        if any(
            e.kind == event.kind and e.source_system == SourceSystem.WEB
            for e in self.list_events(event.employee_id, event.work_date)
        ):
            return False
        return self.add_events([event]) == 1

    def get_daily(self, employee_id: int, work_date: date) -> Optional[DailyAttendance]:
        return self.daily.get((employee_id, work_date))

    def upsert_daily(self, attendance: DailyAttendance) -> None:
        self.daily[(attendance.employee_id, attendance.work_date)] = attendance


class InMemorySummaries:
    def __init__(self):
        self.rows = {}

    def upsert(self, summary) -> None:
        self.rows[(summary.employee_id, summary.work_date)] = summary

    def get(self, employee_id: int, work_date: date):
        return self.rows.get((employee_id, work_date))

    def list_between(self, *, start_date, end_date, employee_id=None):
        return sorted(
            (
                s
                for s in self.rows.values()
                if start_date <= s.work_date <= end_date and (employee_id is None or s.employee_id == employee_id)
            ),
            key=lambda s: (s.employee_id, s.work_date),
        )


class InMemoryLeave:
    def __init__(self):
        self.counters: dict[int, dict[str, Decimal]] = defaultdict(
            lambda: {"annual_days": ZERO, "used_annual_days": ZERO, "sick_days": ZERO, "used_sick_days": ZERO}
        )
        self.credits: dict[tuple[int, date, LeaveKind], Decimal] = {}
        self.debits: list[tuple[int, LeaveKind, Decimal]] = []

    def get_counters(self, employee_id: int) -> LeaveCounters:
        return LeaveCounters(**self.counters[employee_id])

    def add_granted_days(self, employee_id, kind, days) -> None:
        self.counters[employee_id][f"{kind.value}_days"] += days

    def use_days_if_available(self, employee_id, kind, days) -> bool:
        c = self.counters[employee_id]
        if c[f"{kind.value}_days"] - c[f"used_{kind.value}_days"] < days:
            return False
        c[f"used_{kind.value}_days"] += days
        return True

    def get_day_credit(self, employee_id, work_date):
        return (
            self.credits.get((employee_id, work_date, LeaveKind.SUBSTITUTE), ZERO),
            self.credits.get((employee_id, work_date, LeaveKind.COMPENSATORY), ZERO),
        )

    def replace_day_credit(self, employee_id, work_date, *, substitute_hours, compensatory_hours) -> None:
        for kind, hours in ((LeaveKind.SUBSTITUTE, substitute_hours), (LeaveKind.COMPENSATORY, compensatory_hours)):
            if hours > 0:
                self.credits[(employee_id, work_date, kind)] = hours
            else:
                self.credits.pop((employee_id, work_date, kind), None)

    def credited_hours(self, employee_id, kind) -> Decimal:
        return sum((h for (e, _, k), h in self.credits.items() if e == employee_id and k == kind), ZERO)

    def debited_hours(self, employee_id, kind) -> Decimal:
        return sum((h for e, k, h in self.debits if e == employee_id and k == kind), ZERO)

    def debit_hours_if_available(self, employee_id, kind, hours) -> bool:
        if self.credited_hours(employee_id, kind) - self.debited_hours(employee_id, kind) < hours:
            return False
        self.debits.append((employee_id, kind, hours))
        return True


class InMemorySettlements:
    def __init__(self):
        self.periods = {}
        self.rows: dict[int, list] = {}

    def create_period(self, *, name, start_date, end_date):
        period = SettlementPeriod(period_id=len(self.periods) + 1, name=name, start_date=start_date, end_date=end_date)
        self.periods[period.period_id] = period
        return period

    def get_period(self, period_id):
        return self.periods.get(period_id)

    def list_periods(self):
        return list(self.periods.values())

    def update_status(self, period_id, *, expected, new) -> bool:
        period = self.periods.get(period_id)
        if not period or period.status != expected:
            return False
        self.periods[period_id] = replace(period, status=new)
        return True

    def complete_with_settlements(self, period_id, settlements) -> None:
        period = self.periods[period_id]
        if period.settlement_completed:
            raise SettlementConflictError(f"period {period_id} has already been settled")
        self.periods[period_id] = replace(period, settlement_completed=True)
        self.rows[period_id] = list(settlements)

    def list_settlements(self, period_id):
        return list(self.rows.get(period_id, []))

    def has_active_period_covering(self, day: date) -> bool:
        return any(p.status == PeriodStatus.ACTIVE and p.covers(day) for p in self.periods.values())


class InMemoryNightPay:
    def __init__(self):
        self.rows = {}

    def upsert_many(self, rows) -> None:
        for r in rows:
            self.rows[(r.employee_id, r.pay_month)] = r

    def list_for_employee(self, employee_id, *, start_month, end_month):
        return [
            r for (e, m), r in sorted(self.rows.items()) if e == employee_id and start_month <= m <= end_month
        ]


def make_services(
    *,
    employees: list[Employee],
    configs: list[RuleConfiguration] | None = None,
    holidays: set[date] | None = None,
    passage_backfill: bool = True,
):
    """Container over in-memory stores; the stores are exposed for assertions."""
    stores = dict(
        employees=InMemoryEmployees(employees),
        rules=InMemoryRules(configs if configs is not None else [RuleConfiguration(effective_from=date(2020, 1, 1))]),
        holidays=InMemoryHolidays(holidays),
        attendance=InMemoryAttendance(),
        summaries=InMemorySummaries(),
        leave=InMemoryLeave(),
        settlements=InMemorySettlements(),
        night_pay=InMemoryNightPay(),
    )
    return build_services(passage_backfill=passage_backfill, **stores), stores
