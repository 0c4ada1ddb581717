from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from attendance_engine.core.enums import RecordMode
from attendance_engine.employees.model import Employee

from fakes import make_services

EMPLOYEE = Employee(employee_id=1, display_name="이재혁")


def work(container, day: date, start: int, end: int):
    service = container.attendance_service
    service.submit_manual_event(1, datetime(day.year, day.month, day.day, start), RecordMode.CHECK_IN)
    return service.submit_manual_event(1, datetime(day.year, day.month, day.day, end), RecordMode.CHECK_OUT)


def test_active_flexible_period_raises_the_overtime_threshold():
    container, _ = make_services(employees=[EMPLOYEE])
    period = container.settlement_service.create_period("Summer", date(2025, 6, 1), date(2025, 8, 31))

    before = work(container, date(2025, 6, 2), 8, 20)
    container.settlement_service.activate(period.period_id)
    during = work(container, date(2025, 6, 3), 8, 20)
    outside = work(container, date(2025, 9, 1), 8, 20)

    assert (before.basic_hours, before.overtime_hours) == (Decimal("8.00"), Decimal("3.00"))
    assert (during.basic_hours, during.overtime_hours) == (Decimal("11.00"), Decimal("0.00"))
    assert outside.overtime_hours == Decimal("3.00")


def test_monthly_stats_sum_the_month():
    container, _ = make_services(employees=[EMPLOYEE])
    work(container, date(2025, 6, 2), 9, 18)
    work(container, date(2025, 6, 3), 9, 20)
    work(container, date(2025, 6, 7), 9, 19)
    work(container, date(2025, 7, 1), 9, 18)

    stats = container.worktime_service.monthly_stats(1, 2025, 6)

    assert stats.work_days == 3
    assert stats.basic_hours == Decimal("24.00")
    assert stats.overtime_hours == Decimal("3.00")
    assert stats.substitute_hours == Decimal("9.50")
    assert stats.to_dict()["month"] == "2025-06"
